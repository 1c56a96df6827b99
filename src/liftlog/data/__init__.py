"""Import and export of tracked records."""

from __future__ import annotations

from liftlog.data.serialization import (
    Dataset,
    dataset_from_dict,
    dataset_to_dict,
    load_dataset,
    save_dataset,
)

__all__ = [
    "Dataset",
    "dataset_from_dict",
    "dataset_to_dict",
    "load_dataset",
    "save_dataset",
]
