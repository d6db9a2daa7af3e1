"""Custom exceptions for orm_elastic."""


class OrmElasticError(Exception):
    """Base exception for orm_elastic."""
    pass


class ConfigurationError(OrmElasticError):
    """Invalid indexing configuration on a model or field."""
    pass


class UnmappedFieldTypeError(ConfigurationError):
    """A property field has a type with no Elasticsearch counterpart."""

    def __init__(self, model: str, field: str, field_type: str):
        self.model = model
        self.field = field
        self.field_type = field_type
        super().__init__(
            f"Could not map {model}.{field}: no type available for {field_type!r}. "
            f"Add a mapping for this type or set the 'elastic.omit' option on the field."
        )
