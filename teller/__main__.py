#!/usr/bin/env python3
"""Main entry point for Teller: python -m teller"""

from .shell import cli


def main():
    """Run the teller command group"""
    cli(prog_name="teller")


if __name__ == "__main__":
    main()
