"""Service layer: conversation orchestration and the command-line interface."""
