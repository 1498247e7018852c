"""
Schema Descriptor
=================

Versioned description of the ER review relational model, handed to every
model prompt as grounding context.
"""

from dataclasses import dataclass

SCHEMA_VERSION = "2025.1"

ER_SCHEMA = {
    "Company": {
        "columns": ["id", "name", "createdAt", "updatedAt"],
        "types": {
            "id": "TEXT",
            "name": "TEXT",
            "createdAt": "DATETIME",
            "updatedAt": "DATETIME",
        },
    },
    "ER": {
        "columns": [
            "id",
            "externalId",
            "subject",
            "overview",
            "description",
            "companyId",
            "status",
            "priorityLabel",
            "submittedPriority",
            "sentiment",
            "committedVersion",
            "requestedAt",
            "updatedAtCsv",
            "strategic",
            "impact",
            "technical",
            "resource",
            "market",
            "totalCached",
            "externalStatus",
            "externalStatusAlt",
            "externalRequestStatus",
            "releaseId",
            "devStatusId",
            "source",
            "lastSyncAt",
            "externalUpdatedAt",
            "zendeskTicketUrl",
            "aiSummary",
            "aiSuggestedScores",
            "createdAt",
            "updatedAt",
            "themeId",
        ],
        "types": {
            "id": "TEXT",
            "companyId": "TEXT",
            "requestedAt": "DATETIME",
            "strategic": "INTEGER",
            "impact": "INTEGER",
            "technical": "INTEGER",
            "resource": "INTEGER",
            "market": "INTEGER",
            "totalCached": "INTEGER",
            "lastSyncAt": "DATETIME",
            "externalUpdatedAt": "DATETIME",
            "createdAt": "DATETIME",
            "updatedAt": "DATETIME",
        },
    },
    "Release": {
        "columns": ["id", "name", "createdAt", "updatedAt"],
        "types": {"id": "TEXT", "createdAt": "DATETIME", "updatedAt": "DATETIME"},
    },
    "DevelopmentStatus": {
        "columns": ["id", "name", "createdAt", "updatedAt"],
        "types": {"id": "TEXT", "createdAt": "DATETIME", "updatedAt": "DATETIME"},
    },
    "Tag": {
        "columns": ["id", "label"],
        "types": {"id": "TEXT"},
    },
    "ERTag": {
        "columns": ["erId", "tagId"],
        "types": {},
    },
    "Comment": {
        "columns": ["id", "erId", "authorId", "body", "createdAt"],
        "types": {"id": "TEXT", "createdAt": "DATETIME"},
    },
    "ERTheme": {
        "columns": [
            "id",
            "title",
            "description",
            "requirements",
            "createdAt",
            "updatedAt",
            "suggestedScores",
        ],
        "types": {"id": "TEXT", "createdAt": "DATETIME", "updatedAt": "DATETIME"},
    },
}

ER_ENUMS = {
    "ERStatus": [
        "OPEN",
        "IN_REVIEW",
        "ACCEPTED",
        "REJECTED",
        "DELIVERED",
        "MANUAL_REVIEW",
        "ACCEPT",
        "REJECT",
    ],
    "ERSource": ["CSV", "ZENDESK"],
}

ER_RELATIONSHIPS = [
    "ER.companyId -> Company.id",
    "ER.releaseId -> Release.id",
    "ER.devStatusId -> DevelopmentStatus.id",
    "ER.themeId -> ERTheme.id",
    "ERTag -> joins ER and Tag",
]


@dataclass(frozen=True)
class SchemaDescriptor:
    """Textual schema plus the version it was rendered from."""

    version: str
    text: str

    def __str__(self) -> str:
        return self.text


def build_schema_descriptor(
    schema: dict = ER_SCHEMA,
    enums: dict = ER_ENUMS,
    relationships: list = ER_RELATIONSHIPS,
    version: str = SCHEMA_VERSION,
) -> SchemaDescriptor:
    """Render the TABLES / ENUMS / RELATIONSHIPS block used in prompts."""
    lines = ["TABLES:"]
    for table_name, table_info in schema.items():
        lines.append(f"- {table_name} ({', '.join(table_info['columns'])})")

    if enums:
        lines.append("")
        lines.append("ENUMS:")
        for enum_name, values in enums.items():
            lines.append(f"- {enum_name}: {', '.join(values)}")

    if relationships:
        lines.append("")
        lines.append("RELATIONSHIPS:")
        lines.extend(f"- {rel}" for rel in relationships)

    return SchemaDescriptor(version=version, text="\n".join(lines))


def schema_ddl(schema: dict = ER_SCHEMA) -> list[str]:
    """CREATE TABLE statements for a local database matching the schema."""
    statements = []
    for table_name, table_info in schema.items():
        columns = []
        for col_name in table_info["columns"]:
            col_type = table_info["types"].get(col_name, "TEXT")
            columns.append(f'"{col_name}" {col_type}')
        statements.append(f'CREATE TABLE "{table_name}" ({", ".join(columns)})')
    return statements


DEFAULT_SCHEMA = build_schema_descriptor()
