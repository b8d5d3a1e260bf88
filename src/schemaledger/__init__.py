"""schemaledger: versioned SQL migrations with a checksummed ledger.

Discovers ``<version>_<name>.sql`` files, applies pending ones in order
inside per-migration transactions, rolls them back through their
``-- DOWN`` sections, and reports drift between files and the ledger.
"""

__version__ = "0.1.0"
