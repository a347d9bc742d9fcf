"""
Metamodel for the SQL DDL grammar.

One metamodel instance is shared by every parse; each DDL statement is parsed
separately so a bad statement never takes the rest of the schema down with it.
"""

from os.path import join, dirname, abspath

from textx import metamodel_from_file

from apigen.processors import get_obj_processors


# ------------------------------------------------------------------------------
# Constants
THIS_DIR = dirname(abspath(__file__))
GRAMMAR_DIR = join(THIS_DIR, "grammar")
TEMPLATES_DIR = join(THIS_DIR, "templates")

_METAMODEL = None


# ------------------------------------------------------------------------------
# Metamodel creation

def get_metamodel(debug: bool = False):
    """
    Load the textX metamodel from grammar/sql_ddl.tx.
    Keywords are case-insensitive and matched on word boundaries.
    """
    mm = metamodel_from_file(
        join(GRAMMAR_DIR, "sql_ddl.tx"),
        ignore_case=True,
        autokwd=True,
        auto_init_attributes=True,
        debug=debug,
    )
    mm.register_obj_processors(get_obj_processors())
    return mm


def ddl_metamodel():
    """Return the cached metamodel (built on first use)."""
    global _METAMODEL
    if _METAMODEL is None:
        _METAMODEL = get_metamodel()
    return _METAMODEL


def parse_statement(statement: str):
    """Parse a single DDL statement and return its Statement node."""
    return ddl_metamodel().model_from_str(statement).statement
