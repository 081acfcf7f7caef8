import locale
from collections.abc import Callable
from typing import NamedTuple

from loguru import logger

from .conf import C_LINE_HEIGHT_PROBE, DEFAULT_SIZING_OPTIONS
from .errors import FontResolutionError
from .protocols import TextMeasurer
from .spec import SpecFontDescriptor, SpecFontMetrics, SpecSizingOptions, SpecTextOptions

################################################################################
# #region ResolutionStrategies


class SpecFontResolutionStrategy(NamedTuple):
    name: str
    fn_resolve: Callable[[TextMeasurer, SpecFontDescriptor, str, str], str | None]


def _resolve_requested_family(
    measurer: TextMeasurer, font: SpecFontDescriptor, locale_name: str, _: str
) -> str | None:
    return measurer.resolve_family(font.family, locale_name)


def _resolve_fallback_family(
    measurer: TextMeasurer, _: SpecFontDescriptor, locale_name: str, fallback: str
) -> str | None:
    return measurer.resolve_family(fallback, locale_name)


def _resolve_first_installed_family(
    measurer: TextMeasurer, *_: object
) -> str | None:
    l_families = measurer.list_families()
    return l_families[0] if l_families else None


TUP_FONT_RESOLUTION_STRATEGIES: tuple[SpecFontResolutionStrategy, ...] = (
    SpecFontResolutionStrategy("requested", _resolve_requested_family),
    SpecFontResolutionStrategy("fallback", _resolve_fallback_family),
    SpecFontResolutionStrategy("installed", _resolve_first_installed_family),
)


def get_active_locale() -> str:
    # Query-only form: no locale argument leaves the setting untouched.
    return locale.setlocale(locale.LC_CTYPE)


# #endregion
################################################################################
# #region FontMetricsCache


class FontMetricsCache:
    """
    Font descriptor -> cached line height, space width and reference-char width.

    Entries are write-once per key and never evicted. Concurrent misses on the
    same key may both measure; ``dict.setdefault`` keeps the first result, and
    both results are identical, so readers need no lock.

    Only integral point sizes measured under the locale active at construction
    time are cached. Fractional sizes and locale drift are measured on every
    call to keep the key space bounded.
    """

    def __init__(
        self,
        measurer: TextMeasurer,
        *,
        options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
        strategies: tuple[SpecFontResolutionStrategy, ...] = TUP_FONT_RESOLUTION_STRATEGIES,
        fn_locale: Callable[[], str] = get_active_locale,
    ) -> None:
        self.measurer = measurer
        self.options = options
        self._strategies = strategies
        self._fn_locale = fn_locale
        self._c_locale_startup = fn_locale()
        self._dict_metrics: dict[SpecFontDescriptor, SpecFontMetrics] = {}
        self._set_families_warned: set[str] = set()

    def __len__(self) -> int:
        return len(self._dict_metrics)

    def __contains__(self, font: object) -> bool:
        return font in self._dict_metrics

    def clear(self) -> None:
        self._dict_metrics.clear()
        self._set_families_warned.clear()

    def resolve(self, font: SpecFontDescriptor) -> SpecFontMetrics:
        c_locale = self._fn_locale()
        b_cacheable = font.is_integral_size and c_locale == self._c_locale_startup
        if b_cacheable:
            cfg_metrics = self._dict_metrics.get(font)
            if cfg_metrics is not None:
                return cfg_metrics

        cfg_metrics = self._measure_metrics(font, c_locale)
        if not b_cacheable:
            logger.debug(
                f"Font metrics cache bypassed for {font!r} (locale={c_locale!r})"
            )
            return cfg_metrics
        return self._dict_metrics.setdefault(font, cfg_metrics)

    def resolve_family(self, font: SpecFontDescriptor, locale_name: str) -> str:
        for _strategy in self._strategies:
            c_family = _strategy.fn_resolve(
                self.measurer, font, locale_name, self.options.fallback_font_family
            )
            if c_family is None:
                continue
            if _strategy.name != "requested" and font.family not in self._set_families_warned:
                self._set_families_warned.add(font.family)
                logger.warning(
                    f"Font family {font.family!r} unavailable; "
                    f"using {c_family!r} ({_strategy.name})"
                )
            return c_family
        raise FontResolutionError(
            f"No usable font family for {font.family!r}: no fonts installed."
        )

    def _measure_metrics(
        self, font: SpecFontDescriptor, locale_name: str
    ) -> SpecFontMetrics:
        font_resolved = font.with_(family=self.resolve_family(font, locale_name))
        cfg_options = SpecTextOptions(font=font_resolved, dpi=self.options.dpi)
        return SpecFontMetrics(
            font_resolved=font_resolved,
            line_height=self.measurer.measure_advance(
                C_LINE_HEIGHT_PROBE, cfg_options
            ).height,
            space_width=self.measurer.measure_size(" ", cfg_options).width,
            reference_char_width=self.measurer.measure_size(
                self.options.reference_char, cfg_options
            ).width,
            text_options=cfg_options,
        )


# #endregion
################################################################################
# #region SharedCaches

# (measurer id, options) -> (measurer, cache); holding the measurer pins its id.
_DICT_SHARED_FONT_CACHES: dict[
    tuple[int, SpecSizingOptions], tuple[TextMeasurer, FontMetricsCache]
] = {}


def get_shared_font_cache(
    measurer: TextMeasurer,
    *,
    options: SpecSizingOptions = DEFAULT_SIZING_OPTIONS,
) -> FontMetricsCache:
    """Process-wide cache for ``measurer``; created lazily, never evicted."""
    tup_key = (id(measurer), options)
    tup_entry = _DICT_SHARED_FONT_CACHES.get(tup_key)
    if tup_entry is None:
        tup_entry = _DICT_SHARED_FONT_CACHES.setdefault(
            tup_key, (measurer, FontMetricsCache(measurer, options=options))
        )
    return tup_entry[1]


# #endregion
################################################################################
