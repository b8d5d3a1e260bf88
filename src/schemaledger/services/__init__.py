"""schemaledger services layer.

- tokenizer: statement splitting and the executable-statement filter
- loader: migration file discovery
- runner: MigrationRunner orchestrating loader and migrator
- generator: scaffolding for new migration files

Import submodules directly; schemaledger.models imports the tokenizer.
"""
