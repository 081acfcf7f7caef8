from collections.abc import Iterable

from loguru import logger

from .protocols import SheetView
from .spec import SpecMergedRegion


class MergeIndex:
    """
    Row-keyed lookup of merged regions.

    Every region is registered under each row it spans, so membership tests
    cost O(regions on that row) instead of a scan over every region of the
    sheet. The index is a snapshot: mutating the sheet's merges afterwards
    makes it stale and the caller must build a new one.
    """

    __slots__ = ("_dict_regions_by_row",)

    def __init__(self, regions: Iterable[SpecMergedRegion] = ()) -> None:
        self._dict_regions_by_row: dict[int, list[SpecMergedRegion]] = {}
        for _region in regions:
            self._register(_region)

    @classmethod
    def build(cls, sheet: SheetView) -> "MergeIndex":
        idx = cls(sheet.merged_regions)
        logger.debug(
            f"MergeIndex built: {len(idx)} regions over "
            f"{len(idx._dict_regions_by_row)} rows"
        )
        return idx

    def _register(self, region: SpecMergedRegion) -> None:
        for _row_idx in range(region.row_first, region.row_last + 1):
            self._dict_regions_by_row.setdefault(_row_idx, []).append(region)

    def __len__(self) -> int:
        return len(self.regions)

    @property
    def rows(self) -> tuple[int, ...]:
        return tuple(sorted(self._dict_regions_by_row))

    @property
    def regions(self) -> tuple[SpecMergedRegion, ...]:
        """Distinct regions, ordered by their first row."""
        return tuple(
            dict.fromkeys(
                _region
                for _row in sorted(self._dict_regions_by_row)
                for _region in self._dict_regions_by_row[_row]
            )
        )

    def try_get_region(self, row: int, col: int) -> SpecMergedRegion | None:
        for _region in self._dict_regions_by_row.get(row, ()):
            if _region.contains(row, col):
                return _region
        return None

    def is_merged(self, row: int, col: int) -> bool:
        return self.try_get_region(row, col) is not None

    def regions_for_row(self, row: int) -> tuple[SpecMergedRegion, ...]:
        # A sheet may list the same rectangle twice; yield it once.
        return tuple(dict.fromkeys(self._dict_regions_by_row.get(row, ())))
