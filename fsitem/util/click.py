"""Options whose argument may be left out, for click. Only the
``--name=value`` form passes an argument; a bare ``--name`` stands for the
option's `bare_value`::

	@cli.command(cls = OptionalValueCommand)
	@click.option('--type', 'type_name', cls = OptionalValueOption, bare_value = 'file')
	def ls(type_name):
		..."""

import click

class OptionalValueOption(click.Option):
	def __init__(self, *args, bare_value, **kwargs):
		super().__init__(*args, **kwargs)
		self.bare_value = bare_value

class OptionalValueCommand(click.Command):
	"""Command class for commands with OptionalValueOption parameters."""

	def parse_args(self, ctx, args):
		"""Rewrite each bare ``--name`` into ``--name=<bare_value>``. Arguments
		after ``--`` are left alone."""

		bare = {}
		for param in self.params:
			if isinstance(param, OptionalValueOption):
				for opt in param.opts:
					bare[opt] = param.bare_value

		newargs = []
		for i, arg in enumerate(args):
			if arg == '--':
				newargs.extend(args[i:])
				break
			if arg in bare:
				arg = '%s=%s' % (arg, bare[arg])
			newargs.append(arg)

		return super().parse_args(ctx, newargs)
