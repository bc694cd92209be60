"""Permet `python -m streamdl`."""

from streamdl.main import main

main()
