from exports.datasets.base import (  # noqa: F401
    AggregateDataset,
    Dataset,
    DEFAULT_PAGE_SIZE,
    ExportContext,
    KeysetDataset,
    Page,
)
