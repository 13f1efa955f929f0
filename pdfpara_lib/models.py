# --- pdfpara_lib/models.py ---
"""
pdfpara_lib/models.py: Data models for positioned text, lines and paragraphs.
"""
from collections import Counter


def resolve_height_mode(samples):
    """Returns the most frequent height sample, the smallest one on ties."""
    if not samples:
        return 0
    counts = Counter(samples)
    return min(counts, key=lambda h: (-counts[h], h))


def compute_bbox(lines):
    """Computes a native-coordinate Box enclosing all given lines."""
    lines = [line for line in lines if line]
    if not lines:
        return Box(0, 0, 0, 0)
    return Box(
        left=min(line.x for line in lines),
        right=max(line.x + line.width for line in lines),
        top=max(line.y + line.height for line in lines),
        bottom=min(line.y for line in lines),
    )


class Box:
    """An axis-aligned rectangle, y growing upwards (top >= bottom)."""

    __slots__ = ("left", "right", "top", "bottom")

    def __init__(self, left, right, top, bottom):
        self.left, self.right, self.top, self.bottom = left, right, top, bottom

    def intersects(self, other) -> bool:
        """Two boxes intersect unless they are disjoint on either axis."""
        return not (
            other.right < self.left
            or other.left > self.right
            or other.bottom > self.top
            or other.top < self.bottom
        )

    def to_dict(self):
        return {
            "left": self.left,
            "right": self.right,
            "top": self.top,
            "bottom": self.bottom,
        }

    def __eq__(self, other):
        if not isinstance(other, Box):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (
            f"Box(left={self.left}, right={self.right}, "
            f"top={self.top}, bottom={self.bottom})"
        )


class PageSize:
    """Pixel (or point) dimensions of a rendered page."""

    __slots__ = ("width", "height")

    def __init__(self, width, height):
        self.width, self.height = width, height

    def normalize(self, x, y, width, height):
        """Maps a native rectangle into [0, 1] fractions of this page."""
        w = self.width or 1
        h = self.height or 1

        def clamp(v):
            return min(1.0, max(0.0, v))

        return Box(
            left=clamp(x / w),
            right=clamp((x + width) / w),
            top=clamp((y + height) / h),
            bottom=clamp(y / h),
        )

    def __repr__(self):
        return f"PageSize({self.width}x{self.height})"


class RawTextItem:
    """A single positioned text fragment as delivered by a page provider."""

    __slots__ = ("text", "x", "y", "width", "height", "url")

    def __init__(self, text, x, y, width, height, url=None):
        self.text, self.x, self.y = text, x, y
        self.width, self.height, self.url = width, height, url

    def __repr__(self):
        return (
            f"RawTextItem({self.text!r}, x={self.x}, y={self.y}, "
            f"w={self.width}, h={self.height})"
        )


class PageContent:
    """The fragments and dimensions of one page."""

    def __init__(self, index, items, size):
        self.index = index
        self.items: list[RawTextItem] = items
        self.size: PageSize = size


# --- DEDUP STATE (TAGGED VARIANT) ---
class DedupState:
    """Base class for the cross-page repetition state of a Line."""

    __slots__ = ()
    removable = False

    def __eq__(self, other):
        return type(self) is type(other) and vars_of(self) == vars_of(other)

    def __hash__(self):
        return hash((type(self).__name__, tuple(vars_of(self).items())))

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in vars_of(self).items())
        return f"{type(self).__name__}({fields})"


def vars_of(state):
    return {k: getattr(state, k) for k in getattr(state, "__slots__", ())}


class Clean(DedupState):
    """The line was not found repeated on any other page."""

    __slots__ = ()


class EdgeRepeatForward(DedupState):
    """Repeated at the same offset from the top of the line sequence."""

    __slots__ = ()
    removable = True


class EdgeRepeatBackward(DedupState):
    """Repeated at the same offset from the bottom of the line sequence."""

    __slots__ = ()
    removable = True


class InteriorRepeat(DedupState):
    """Repeated outside the protected content region on other pages."""

    __slots__ = ("count", "matched_with", "threshold")

    def __init__(self, count, matched_with=None, threshold=3):
        self.count = count
        # (page, line_index) of the last confirmed match
        self.matched_with = matched_with
        self.threshold = threshold

    @property
    def removable(self):
        return self.count > self.threshold


CLEAN = Clean()


class Line:
    """Fragments merged into one vertical band of a page."""

    __slots__ = ("x", "y", "text", "width", "height", "height_samples", "url", "state")

    def __init__(self, x, y, text, width, height, url=None):
        self.x, self.y, self.text = x, y, text
        self.width, self.height = width, height
        self.height_samples = [height]
        self.url = url
        self.state: DedupState = CLEAN

    @classmethod
    def from_item(cls, item: RawTextItem):
        return cls(item.x, item.y, item.text, item.width, item.height, item.url)

    def finalize(self):
        """Resolves the representative height from the collected samples."""
        self.height = resolve_height_mode(self.height_samples)
        return self

    def normalized_box(self, size: PageSize) -> Box:
        return size.normalize(self.x, self.y, self.width, self.height)

    @property
    def is_removed(self) -> bool:
        return self.state.removable

    def __repr__(self):
        return f"Line({self.text!r}, x={self.x}, y={self.y}, h={self.height})"


class Paragraph:
    """An ordered run of lines from one page forming one semantic block."""

    def __init__(self, lines, page):
        self.lines: list[Line] = lines
        self.page_num = page

    def __len__(self):
        return len(self.lines)

    @property
    def last_line(self):
        return self.lines[-1] if self.lines else None


class TextBlock:
    """Final output unit: paragraph text with page and box provenance."""

    def __init__(self, content, page, box, source_key=""):
        self.content: str = content
        self.page: int = page
        self.box: Box = box
        self.source_key: str = source_key

    def to_dict(self):
        return {
            "content": self.content,
            "page": self.page,
            "box": self.box.to_dict(),
            "source_key": self.source_key,
        }

    def __eq__(self, other):
        if not isinstance(other, TextBlock):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        preview = self.content[:40]
        return f"TextBlock(page={self.page}, {preview!r})"
