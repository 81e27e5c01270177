#! /usr/bin/env python3

from fsitem.cli import main

if __name__ == '__main__':
	main()
