"""Output rendering for ServiceResult: Rich, quiet, and JSON modes."""
