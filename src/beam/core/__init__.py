"""BEAM protocol core: models, validation and configuration. No I/O."""
