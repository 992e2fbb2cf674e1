import sys
from abc import ABC, abstractmethod

import colorama
from colorama import Fore, Style


COLORS = (
    "red", "blue", "green", "yellow", "orange", "purple", "black", "white", "transparent",
)

DEFAULT_BACKGROUND = "white"


def parse_color(name):
    """Return the canonical (lowercase) color name, or None if it is not a known color."""
    if not isinstance(name, str):
        return None
    key = name.strip().lower()
    if key in COLORS:
        return key
    return None


class Visualizer(ABC):
    """What the interpreter talks to.

    The interpreter only decides which operation to perform and where. The
    visualizer owns the pixels: it rasterizes lines, circles, rectangles and
    fills, and answers cell_color() for the query functions.
    """

    @abstractmethod
    def notify_spawn(self, x: int, y: int) -> None: ...

    @abstractmethod
    def notify_color_changed(self, color: str) -> None: ...

    @abstractmethod
    def notify_brush_size_changed(self, size: int) -> None: ...

    @abstractmethod
    def notify_draw_line(self, x1: int, y1: int, x2: int, y2: int, color: str, brush_size: int) -> None: ...

    @abstractmethod
    def notify_draw_circle(self, center_x: int, center_y: int, radius: int, color: str, brush_size: int) -> None: ...

    @abstractmethod
    def notify_draw_rectangle(self, x: int, y: int, width: int, height: int, color: str, brush_size: int) -> None: ...

    @abstractmethod
    def notify_fill(self, x: int, y: int, color: str) -> None: ...

    @abstractmethod
    def cell_color(self, x: int, y: int) -> str:
        """Color name of the cell at (x, y); only called with in-bounds coordinates."""


class RecordingVisualizer(Visualizer):
    """Keeps every notification in order and serves cell colors from a sparse map."""

    def __init__(self, background: str = DEFAULT_BACKGROUND):
        self.background = background
        self.cells = {}   # (x, y) -> color name
        self.calls = []   # list of (name, args tuple)

    def set_cell(self, x: int, y: int, color: str):
        self.cells[(x, y)] = color

    def names(self):
        return [name for name, _ in self.calls]

    def notify_spawn(self, x, y):
        self.calls.append(("spawn", (x, y)))

    def notify_color_changed(self, color):
        self.calls.append(("color", (color,)))

    def notify_brush_size_changed(self, size):
        self.calls.append(("size", (size,)))

    def notify_draw_line(self, x1, y1, x2, y2, color, brush_size):
        self.calls.append(("draw_line", (x1, y1, x2, y2, color, brush_size)))

    def notify_draw_circle(self, center_x, center_y, radius, color, brush_size):
        self.calls.append(("draw_circle", (center_x, center_y, radius, color, brush_size)))

    def notify_draw_rectangle(self, x, y, width, height, color, brush_size):
        self.calls.append(("draw_rectangle", (x, y, width, height, color, brush_size)))

    def notify_fill(self, x, y, color):
        self.calls.append(("fill", (x, y, color)))

    def cell_color(self, x, y):
        return self.cells.get((x, y), self.background)


class TraceVisualizer(RecordingVisualizer):
    """RecordingVisualizer that also prints each notification (used by `cli.py run`)."""

    ANSI = {
        "red": Fore.RED,
        "blue": Fore.BLUE,
        "green": Fore.GREEN,
        "yellow": Fore.YELLOW,
        "orange": Fore.LIGHTYELLOW_EX,
        "purple": Fore.MAGENTA,
        "black": Fore.BLACK,
        "white": Fore.WHITE,
        "transparent": Style.DIM,
    }

    def __init__(self, stream=None, use_color=None, background: str = DEFAULT_BACKGROUND):
        super().__init__(background)
        self.stream = stream if stream is not None else sys.stdout
        if use_color is None:
            use_color = hasattr(self.stream, "isatty") and self.stream.isatty()
        self.use_color = use_color
        if self.use_color:
            colorama.just_fix_windows_console()

    def paint(self, color):
        if not self.use_color:
            return color
        return f"{self.ANSI.get(color, '')}{color}{Style.RESET_ALL}"

    def emit(self, text):
        print(text, file=self.stream)

    def notify_spawn(self, x, y):
        super().notify_spawn(x, y)
        self.emit(f"spawn at ({x}, {y})")

    def notify_color_changed(self, color):
        super().notify_color_changed(color)
        self.emit(f"brush color -> {self.paint(color)}")

    def notify_brush_size_changed(self, size):
        super().notify_brush_size_changed(size)
        self.emit(f"brush size -> {size}")

    def notify_draw_line(self, x1, y1, x2, y2, color, brush_size):
        super().notify_draw_line(x1, y1, x2, y2, color, brush_size)
        self.emit(f"line ({x1}, {y1}) -> ({x2}, {y2}) {self.paint(color)} size={brush_size}")

    def notify_draw_circle(self, center_x, center_y, radius, color, brush_size):
        super().notify_draw_circle(center_x, center_y, radius, color, brush_size)
        self.emit(f"circle center=({center_x}, {center_y}) r={radius} {self.paint(color)} size={brush_size}")

    def notify_draw_rectangle(self, x, y, width, height, color, brush_size):
        super().notify_draw_rectangle(x, y, width, height, color, brush_size)
        self.emit(f"rectangle ({x}, {y}) {width}x{height} {self.paint(color)} size={brush_size}")

    def notify_fill(self, x, y, color):
        super().notify_fill(x, y, color)
        self.emit(f"fill from ({x}, {y}) {self.paint(color)}")
