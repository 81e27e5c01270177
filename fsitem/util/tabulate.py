"""Render rows of cells as aligned text columns, for ``ls --long`` and
``stat``."""

def tabulate(rows, *, right = ()):
	"""Join rows of cells into a table, padding every column to its widest
	cell. Rows may have different numbers of cells.

	:param rows: The cells, one iterable per line. Cells are passed through str().
	:param right: Indexes of the columns to right-justify.
	:return: The table, without a trailing newline.
	:rtype: str"""

	rows = [[str(cell) for cell in row] for row in rows]
	widths = {}
	for row in rows:
		for i, cell in enumerate(row):
			widths[i] = max(widths.get(i, 0), len(cell))

	lines = []
	for row in rows:
		cells = [
			cell.rjust(widths[i]) if i in right else cell.ljust(widths[i])
			for i, cell in enumerate(row)
		]
		lines.append('  '.join(cells).rstrip())
	return '\n'.join(lines)
