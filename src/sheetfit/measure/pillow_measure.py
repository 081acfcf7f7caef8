"""
Pillow-backed text measurement.

Fonts are discovered by scanning the platform font directories (plus any
``font_dirs`` / ``font_files`` given) the first time a family is needed.
Family and style names are read from the font files through Pillow, so no
fontconfig or Office installation is required.
"""

import os
import sys
import threading
from collections.abc import Iterable, Sequence
from functools import lru_cache
from pathlib import Path

from loguru import logger
from PIL import ImageFont

from ..sizing.spec import SpecFontDescriptor, SpecTextExtent, SpecTextOptions

TUP_FONT_SUFFIXES = (".ttf", ".otf", ".ttc")
N_POINTS_PER_INCH = 72.0
N_DISCOVERY_SIZE_PX = 12
N_COLLECTION_FACES_MAX = 64

# family (casefolded) -> (display name, {style: (path, face index)})
DictFamilies = dict[str, tuple[str, dict[str, tuple[str, int]]]]


def get_platform_font_dirs() -> list[Path]:
    path_home = Path.home()
    if sys.platform == "win32":
        l_dirs = [Path(os.environ.get("WINDIR", r"C:\Windows")) / "Fonts"]
        if c_local := os.environ.get("LOCALAPPDATA"):
            l_dirs.append(Path(c_local) / "Microsoft" / "Windows" / "Fonts")
        return l_dirs
    if sys.platform == "darwin":
        return [
            Path("/System/Library/Fonts"),
            Path("/Library/Fonts"),
            path_home / "Library" / "Fonts",
        ]
    return [
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        path_home / ".fonts",
        path_home / ".local" / "share" / "fonts",
    ]


def _iter_font_files(dirs: Iterable[Path]) -> Iterable[Path]:
    for _dir in dirs:
        if not _dir.is_dir():
            continue
        for _path in sorted(_dir.rglob("*")):
            if _path.suffix.lower() in TUP_FONT_SUFFIXES and _path.is_file():
                yield _path


def iter_font_faces(path: Path) -> Iterable[tuple[int, str, str]]:
    """
    ``(face index, family, style)`` for each face stored in ``path``.

    Names are read with throwaway font objects, outside the measuring cache.
    ``.ttc`` collections are walked until FreeType rejects the face index.
    """
    n_faces_max = N_COLLECTION_FACES_MAX if path.suffix.lower() == ".ttc" else 1
    for _index in range(n_faces_max):
        try:
            font_ = ImageFont.truetype(str(path), size=N_DISCOVERY_SIZE_PX, index=_index)
        except OSError:
            if _index == 0:
                raise
            return
        c_family_, c_style_ = font_.getname()
        yield _index, c_family_ or "", c_style_ or ""


@lru_cache(maxsize=256)
def _load_font(path: str, face_index: int, size_px: int) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(path, size=size_px, index=face_index)


def convert_points_to_font_px(size_points: float, dpi: int) -> int:
    """Pillow sizes fonts in pixels: ``px = pt * dpi / 72``."""
    return max(1, round(size_points * dpi / N_POINTS_PER_INCH))


def _score_style(style: str, bold: bool, italic: bool) -> int:
    c_style = style.lower()
    b_bold = "bold" in c_style
    b_italic = "italic" in c_style or "oblique" in c_style
    return (b_bold == bold) * 2 + (b_italic == italic)


class PillowTextMeasurer:
    """
    Text measurement through ``PIL.ImageFont``.

    Args:
        font_dirs: Directories scanned in addition to the platform defaults.
        font_files: Explicit font files registered before any scan.
        major_version: Backend generation reported to the sizing engine.
        scan_platform_dirs: Scan the platform font directories.
    """

    def __init__(
        self,
        font_dirs: Sequence[str | Path] | None = None,
        font_files: Sequence[str | Path] | None = None,
        major_version: int = 2,
        *,
        scan_platform_dirs: bool = True,
    ) -> None:
        self.major_version = major_version
        self._l_font_dirs = [Path(_dir) for _dir in font_dirs or ()]
        self._l_font_files = [Path(_file) for _file in font_files or ()]
        self._b_scan_platform_dirs = scan_platform_dirs
        self._dict_families: DictFamilies | None = None
        self._lock = threading.Lock()

    ############################################################
    # #region Discovery
    def _register_file(self, path: Path, dict_families: DictFamilies) -> None:
        try:
            l_faces = list(iter_font_faces(path))
        except OSError as exc:
            logger.debug(f"Skip unreadable font file {path}: {exc}")
            return
        for _index, _family, _style in l_faces:
            if not _family:
                continue
            _, dict_styles_ = dict_families.setdefault(_family.casefold(), (_family, {}))
            dict_styles_.setdefault(_style or "Regular", (str(path), _index))

    def _get_families(self) -> DictFamilies:
        if self._dict_families is not None:
            return self._dict_families
        with self._lock:
            if self._dict_families is None:
                dict_families: DictFamilies = {}
                for _path in self._l_font_files:
                    self._register_file(_path, dict_families)
                l_dirs = list(self._l_font_dirs)
                if self._b_scan_platform_dirs:
                    l_dirs.extend(get_platform_font_dirs())
                for _path in _iter_font_files(l_dirs):
                    self._register_file(_path, dict_families)
                logger.debug(f"Discovered {len(dict_families)} font families")
                self._dict_families = dict_families
        return self._dict_families

    def list_families(self) -> list[str]:
        return sorted(_name for _name, _ in self._get_families().values())

    def resolve_family(self, name: str, locale: str) -> str | None:
        # Pillow exposes no localized family names; ``locale`` does not narrow.
        tup_entry = self._get_families().get(name.casefold())
        return None if tup_entry is None else tup_entry[0]

    def get_font_face(self, font: SpecFontDescriptor) -> tuple[str, int]:
        """``(path, face index)`` of the installed face closest to ``font``."""
        tup_entry = self._get_families().get(font.family.casefold())
        if tup_entry is None:
            raise LookupError(f"Font family {font.family!r} is not installed.")
        _, dict_styles = tup_entry
        c_style = max(
            dict_styles, key=lambda s: _score_style(s, font.bold, font.italic)
        )
        return dict_styles[c_style]

    def load_font(self, options: SpecTextOptions) -> ImageFont.FreeTypeFont:
        c_path, n_face_index = self.get_font_face(options.font)
        return _load_font(
            c_path,
            n_face_index,
            convert_points_to_font_px(options.font.size_points, options.dpi),
        )

    # #endregion
    ############################################################
    # #region Measurement
    def wrap_lines(
        self, text: str, font: ImageFont.FreeTypeFont, wrap_width_px: float | None
    ) -> list[str]:
        """
        Break ``text`` into display lines.

        Explicit newlines always break. With a wrap width, words are packed
        greedily; a word wider than the budget is split per character.
        """
        l_paragraphs = text.replace("\r\n", "\n").split("\n")
        if wrap_width_px is None:
            return l_paragraphs

        l_lines: list[str] = []
        for _paragraph in l_paragraphs:
            c_line = ""
            for _word in _paragraph.split(" "):
                c_candidate = f"{c_line} {_word}" if c_line else _word
                if font.getlength(c_candidate) <= wrap_width_px:
                    c_line = c_candidate
                    continue
                if c_line:
                    l_lines.append(c_line)
                c_line = ""
                for _char in _word:
                    if c_line and font.getlength(c_line + _char) > wrap_width_px:
                        l_lines.append(c_line)
                        c_line = _char
                    else:
                        c_line += _char
            l_lines.append(c_line)
        return l_lines

    def measure_advance(self, text: str, options: SpecTextOptions) -> SpecTextExtent:
        font = self.load_font(options)
        l_lines = self.wrap_lines(text, font, options.wrap_width_px)
        n_ascent, n_descent = font.getmetrics()
        return SpecTextExtent(
            width=max((font.getlength(_line) for _line in l_lines), default=0.0),
            height=float(len(l_lines) * (n_ascent + n_descent)),
        )

    def measure_size(self, text: str, options: SpecTextOptions) -> SpecTextExtent:
        """Ink box of ``text``; whitespace-only text reports its advance width."""
        font = self.load_font(options)
        if not text.strip():
            n_ascent, n_descent = font.getmetrics()
            return SpecTextExtent(
                width=float(font.getlength(text)), height=float(n_ascent + n_descent)
            )
        n_left, n_top, n_right, n_bottom = font.getbbox(text)
        return SpecTextExtent(width=float(n_right - n_left), height=float(n_bottom - n_top))

    # #endregion
    ############################################################
