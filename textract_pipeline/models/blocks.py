"""
Block Graph Models

Pydantic models for the blocks returned by Textract GetDocumentTextDetection
and GetDocumentAnalysis. Blocks are a tagged union discriminated by
BlockType; relationships reference other blocks by id only.

BlockGraph holds one job's blocks in result order plus an id index built
once from the same sequence. Neither is mutated after construction.
"""

from collections.abc import Iterator, Sequence
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter

from textract_pipeline.exceptions import MissingBlockError


class BlockType(str, Enum):
    """Block types the reconstructors understand."""

    LINE = "LINE"
    WORD = "WORD"
    SELECTION_ELEMENT = "SELECTION_ELEMENT"
    KEY_VALUE_SET = "KEY_VALUE_SET"
    TABLE = "TABLE"
    CELL = "CELL"


class RelationshipType(str, Enum):
    """Relationship types followed during reconstruction."""

    CHILD = "CHILD"
    VALUE = "VALUE"


class SelectionStatus(str, Enum):
    SELECTED = "SELECTED"
    NOT_SELECTED = "NOT_SELECTED"


class Relationship(BaseModel):
    """Directed edge from one block to others, by id."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str = Field(..., alias="Type")
    ids: tuple[str, ...] = Field(default=(), alias="Ids")


class _BaseBlock(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="Id")
    relationships: tuple[Relationship, ...] = Field(default=(), alias="Relationships")

    def related_ids(self, relationship_type: RelationshipType) -> list[str]:
        """Ids referenced by relationships of the given type, in order."""
        return [
            block_id
            for relationship in self.relationships
            if relationship.type == relationship_type.value
            for block_id in relationship.ids
        ]


class LineBlock(_BaseBlock):
    block_type: Literal["LINE"] = Field(default="LINE", alias="BlockType")
    text: str | None = Field(default=None, alias="Text")


class WordBlock(_BaseBlock):
    block_type: Literal["WORD"] = Field(default="WORD", alias="BlockType")
    text: str | None = Field(default=None, alias="Text")


class SelectionElementBlock(_BaseBlock):
    block_type: Literal["SELECTION_ELEMENT"] = Field(
        default="SELECTION_ELEMENT", alias="BlockType"
    )
    selection_status: SelectionStatus | None = Field(default=None, alias="SelectionStatus")


class KeyValueSetBlock(_BaseBlock):
    block_type: Literal["KEY_VALUE_SET"] = Field(default="KEY_VALUE_SET", alias="BlockType")
    entity_types: tuple[str, ...] = Field(default=(), alias="EntityTypes")

    @property
    def is_key(self) -> bool:
        """Key side of a key/value pair. Anything else is treated as a value."""
        return "KEY" in self.entity_types


class TableBlock(_BaseBlock):
    block_type: Literal["TABLE"] = Field(default="TABLE", alias="BlockType")


class CellBlock(_BaseBlock):
    block_type: Literal["CELL"] = Field(default="CELL", alias="BlockType")
    row_index: int = Field(..., ge=1, alias="RowIndex")
    column_index: int = Field(..., ge=1, alias="ColumnIndex")


class OtherBlock(_BaseBlock):
    """PAGE, MERGED_CELL, LAYOUT_* and any other block the reconstructors skip."""

    block_type: str = Field(..., alias="BlockType")


_KNOWN_BLOCK_TYPES = frozenset(t.value for t in BlockType)


def _block_tag(value: Any) -> str:
    if isinstance(value, dict):
        block_type = value.get("BlockType", value.get("block_type"))
    else:
        block_type = getattr(value, "block_type", None)
    if block_type in _KNOWN_BLOCK_TYPES:
        return block_type
    return "OTHER"


Block = Annotated[
    Union[
        Annotated[LineBlock, Tag("LINE")],
        Annotated[WordBlock, Tag("WORD")],
        Annotated[SelectionElementBlock, Tag("SELECTION_ELEMENT")],
        Annotated[KeyValueSetBlock, Tag("KEY_VALUE_SET")],
        Annotated[TableBlock, Tag("TABLE")],
        Annotated[CellBlock, Tag("CELL")],
        Annotated[OtherBlock, Tag("OTHER")],
    ],
    Discriminator(_block_tag),
]

_block_list_adapter = TypeAdapter(list[Block])

BlockT = TypeVar("BlockT", bound=_BaseBlock)


def parse_blocks(raw_blocks: Sequence[dict[str, Any]]) -> list[Block]:
    """
    Validate raw Textract block dicts into typed blocks.

    Raises:
        pydantic.ValidationError: If a block is missing required fields
    """
    return _block_list_adapter.validate_python(list(raw_blocks))


class BlockGraph:
    """
    One job's blocks in result order, indexed by id.

    Lookups of ids that are not in the set raise MissingBlockError.
    """

    def __init__(self, blocks: Sequence[Block]) -> None:
        self._blocks: tuple[Block, ...] = tuple(blocks)
        self._index = MappingProxyType({block.id: block for block in self._blocks})

    @classmethod
    def from_textract(cls, raw_blocks: Sequence[dict[str, Any]]) -> "BlockGraph":
        return cls(parse_blocks(raw_blocks))

    @property
    def blocks(self) -> tuple[Block, ...]:
        return self._blocks

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks)

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._index

    def __getitem__(self, block_id: str) -> Block:
        try:
            return self._index[block_id]
        except KeyError:
            raise MissingBlockError(block_id) from None

    def of_type(self, block_cls: type[BlockT]) -> Iterator[BlockT]:
        """Blocks of one variant, in result order."""
        for block in self._blocks:
            if isinstance(block, block_cls):
                yield block

    def related(self, block: Block, relationship_type: RelationshipType) -> Iterator[Block]:
        """Resolve a block's relationships of one type, in relationship and id order."""
        for block_id in block.related_ids(relationship_type):
            yield self[block_id]
