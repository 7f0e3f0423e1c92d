"""Metadata emitted by the get and put steps."""

from typing import List

from pydantic import BaseModel, Field, RootModel


class MetadataField(BaseModel):
    """Single name/value pair shown in the pipeline UI."""

    name: str
    value: str


class Metadata(RootModel[List[MetadataField]]):
    """Ordered list of metadata fields."""

    root: List[MetadataField] = Field(default_factory=list)

    def add(self, name: str, value: str) -> None:
        """Append a field."""
        self.root.append(MetadataField(name=name, value=value))

    def __iter__(self):
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)
