"""
The fixed table of export datasets.

This module is the only place a dataset is wired in.  The table is built
once at import time and never changes afterwards.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator, List, Tuple

from exports.datasets.base import Dataset
from exports.datasets.appointments import AppointmentsDataset
from exports.datasets.bed_assignments import BedAssignmentsDataset
from exports.datasets.billing import BillingDataset
from exports.datasets.dental import DentalDataset
from exports.datasets.labs import LabsDataset
from exports.datasets.obstetrics import ObstetricsDataset
from exports.datasets.patients import PatientsDataset
from exports.datasets.payments import PaymentsDataset
from exports.datasets.pharmacy import PharmacyDataset
from exports.datasets.queue_events import QueueEventsDataset
from exports.datasets.radiology import RadiologyDataset
from exports.datasets.reception_daily import ReceptionDailyDataset
from exports.datasets.reception_register import ReceptionRegisterDataset
from exports.datasets.reception_register_detailed import ReceptionRegisterDetailedDataset
from exports.errors import NotFoundError


class DatasetRegistry:
    def __init__(self, datasets: Iterable[Dataset]):
        table = {}
        for dataset in datasets:
            if dataset.name in table:
                raise ValueError(f'Dataset {dataset.name!r} registered twice')
            table[dataset.name] = dataset
        self._datasets = MappingProxyType(table)

    def get(self, name) -> Dataset:
        """Exact, case-sensitive lookup."""
        dataset = self._datasets.get(name) if isinstance(name, str) else None
        if dataset is None:
            raise NotFoundError(f'Unknown dataset "{name}".')
        return dataset

    def names(self) -> Tuple[str, ...]:
        return tuple(self._datasets)

    def describe(self) -> List[dict]:
        return [dataset.describe() for dataset in self._datasets.values()]

    def __contains__(self, name) -> bool:
        return name in self._datasets

    def __iter__(self) -> Iterator[Dataset]:
        return iter(self._datasets.values())

    def __len__(self) -> int:
        return len(self._datasets)


registry = DatasetRegistry([
    AppointmentsDataset(),
    LabsDataset(),
    BillingDataset(),
    PatientsDataset(),
    RadiologyDataset(),
    PharmacyDataset(),
    BedAssignmentsDataset(),
    PaymentsDataset(),
    ReceptionRegisterDataset(),
    ReceptionRegisterDetailedDataset(),
    QueueEventsDataset(),
    ReceptionDailyDataset(),
    ObstetricsDataset(),
    DentalDataset(),
])
