"""
Document Reconstruction

Rebuilds document content from a Textract block graph:
- extract_text: LINE text in result order
- extract_form_data: key text -> value text from KEY_VALUE_SET pairs
- extract_tables: every TABLE rendered as comma-delimited rows

All functions are pure; they read the graph and never modify it.
"""

from dataclasses import dataclass, field

import structlog

from textract_pipeline.models.blocks import (
    Block,
    BlockGraph,
    CellBlock,
    KeyValueSetBlock,
    LineBlock,
    RelationshipType,
    SelectionElementBlock,
    SelectionStatus,
    TableBlock,
    WordBlock,
)

log = structlog.get_logger()

SELECTED_TOKEN = "X"


@dataclass
class DocumentReconstruction:
    """The three reconstructions of one job's blocks."""

    lines: list[str] = field(default_factory=list)
    form_data: dict[str, str | None] = field(default_factory=dict)
    tables: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.lines and not self.form_data and self.tables is None


def get_text(block: Block, graph: BlockGraph) -> str:
    """
    Render a block's CHILD words and selection marks as one string.

    WORD children contribute their text, SELECTED selection elements
    contribute "X". Tokens are joined with single spaces in relationship order.

    Raises:
        MissingBlockError: If a CHILD id is not in the graph
    """
    tokens = []
    for child in graph.related(block, RelationshipType.CHILD):
        if isinstance(child, WordBlock):
            tokens.append(child.text or "")
        elif (
            isinstance(child, SelectionElementBlock)
            and child.selection_status == SelectionStatus.SELECTED
        ):
            tokens.append(SELECTED_TOKEN)
    return " ".join(tokens)


def extract_text(graph: BlockGraph) -> list[str]:
    """Text of every LINE block, in result order."""
    return [block.text for block in graph.of_type(LineBlock) if block.text is not None]


def extract_form_data(graph: BlockGraph) -> dict[str, str | None]:
    """
    Map each form key's text to its value's text.

    A key linked to several values keeps the last one. A key without a
    VALUE relationship maps to None. Keys rendering to the same text
    overwrite each other in result order.
    """
    form_data: dict[str, str | None] = {}

    for block in graph.of_type(KeyValueSetBlock):
        if not block.is_key:
            continue

        value_ids = block.related_ids(RelationshipType.VALUE)
        value_block = graph[value_ids[-1]] if value_ids else None

        key_text = get_text(block, graph)
        form_data[key_text] = get_text(value_block, graph) if value_block is not None else None

    return form_data


def _table_rows(table: TableBlock, graph: BlockGraph) -> dict[int, dict[int, str]]:
    rows: dict[int, dict[int, str]] = {}
    for child in graph.related(table, RelationshipType.CHILD):
        if isinstance(child, CellBlock):
            rows.setdefault(child.row_index, {})[child.column_index] = get_text(child, graph)
    return rows


def _render_table(table_number: int, rows: dict[int, dict[int, str]]) -> str:
    parts = [f"Table: Table_{table_number}\n\n"]
    for row_index in sorted(rows):
        columns = rows[row_index]
        parts.append(",".join(columns[col] for col in sorted(columns)) + "\n")
    parts.append("\n\n")
    return "".join(parts)


def extract_tables(graph: BlockGraph) -> str | None:
    """
    Render every TABLE block as delimited text.

    Tables are numbered Table_1, Table_2, ... in result order. Cells are
    placed by their 1-based row and column index; rows and columns are
    emitted in ascending order.

    Returns:
        Rendered tables, or None if the graph has no TABLE blocks
    """
    tables = list(graph.of_type(TableBlock))
    if not tables:
        return None

    return "".join(
        _render_table(number, _table_rows(table, graph))
        for number, table in enumerate(tables, start=1)
    )


def reconstruct_document(graph: BlockGraph) -> DocumentReconstruction:
    """Run all three reconstructions over one job's blocks."""
    result = DocumentReconstruction(
        lines=extract_text(graph),
        form_data=extract_form_data(graph),
        tables=extract_tables(graph),
    )

    log.info(
        "document_reconstructed",
        block_count=len(graph),
        line_count=len(result.lines),
        form_field_count=len(result.form_data),
        has_tables=result.tables is not None,
    )

    return result
