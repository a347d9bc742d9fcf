"""apigen: multi-target CRUD scaffolding generator driven by SQL or OpenAPI schemas."""

__version__ = "0.4.0"
