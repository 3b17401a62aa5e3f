"""
isagen Command-Line Interface
=============================

The ``isagen`` tool is a Click group with three commands:

- **compile**: compile an instruction table into a dispatch module (or JSON,
  or a listing), optionally writing placeholder handlers alongside
- **stubs**: write only the placeholder handler module
- **show**: print a summary of a table, or the entry for one opcode
"""

__all__ = ["isagen"]
