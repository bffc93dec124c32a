from typing import List


class DiscogsSchemaException(Exception):
    """Base exception for the schema tool"""
    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class SchemaScriptNotFound(DiscogsSchemaException):
    """A packaged SQL script is missing or was never defined"""
    def __init__(self, path: str):
        super().__init__(detail=f"SQL script {path} not found")
        self.path = path


class SchemaError(DiscogsSchemaException):
    """The requested schema operation is not valid"""
    pass


class SchemaMismatchError(DiscogsSchemaException):
    """The live database does not match the declared tables"""
    def __init__(self, differences: List[str]):
        super().__init__(
            detail=f"Schema has {len(differences)} difference(s): " + "; ".join(differences)
        )
        self.differences = differences
