#!/usr/bin/env python3
"""
Immediate-mode graphics context used by spheres, curves and the scene.

Objects draw themselves by programming a small GL-style stack machine:

    gc.push_matrix()
    gc.translate(x, y, z)
    gc.scale(r, r, r)
    gc.color(rgb)
    gc.begin_end("sphere")
    gc.pop_matrix()

MatrixStackContext tracks the model matrix and hands every primitive to
draw_primitive() together with the current matrix, color and lighting state.
Backends only have to turn a unit primitive plus a matrix into pixels.

Primitives (all in local, unscaled coordinates)
- "sphere", "sphere-wireframe": unit sphere centred at the origin.
- "square": unit square centred at the origin in the xy plane.
- "path": unit segment from the origin along +z.
"""
import math
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Optional, Tuple

from .vector_utils import Point3d

LIGHTING = "lighting"
LIGHT0 = "light0"

PRIMITIVES = ("sphere", "sphere-wireframe", "square", "path")

Color = Tuple[int, int, int]


class Mat4:
    """4x4 matrix stored as [row][col], applied to column vectors."""
    __slots__ = ('m',)

    def __init__(self, data=None):
        if data:
            self.m = data
        else:
            self.m = [[0.0] * 4 for _ in range(4)]

    @classmethod
    def identity(cls) -> 'Mat4':
        res = cls()
        for i in range(4):
            res.m[i][i] = 1.0
        return res

    @classmethod
    def translation(cls, x, y, z) -> 'Mat4':
        mat = cls.identity()
        mat.m[0][3] = x
        mat.m[1][3] = y
        mat.m[2][3] = z
        return mat

    @classmethod
    def scaling(cls, sx, sy, sz) -> 'Mat4':
        mat = cls.identity()
        mat.m[0][0] = sx
        mat.m[1][1] = sy
        mat.m[2][2] = sz
        return mat

    @classmethod
    def rotation(cls, degrees: float, x: float, y: float, z: float) -> 'Mat4':
        """Rotation about an arbitrary axis, as glRotatef."""
        length = math.sqrt(x * x + y * y + z * z)
        if length == 0:
            return cls.identity()
        x, y, z = x / length, y / length, z / length
        rad = math.radians(degrees)
        c = math.cos(rad)
        s = math.sin(rad)
        t = 1.0 - c
        return cls([
            [t * x * x + c,     t * x * y - s * z, t * x * z + s * y, 0.0],
            [t * x * y + s * z, t * y * y + c,     t * y * z - s * x, 0.0],
            [t * x * z - s * y, t * y * z + s * x, t * z * z + c,     0.0],
            [0.0, 0.0, 0.0, 1.0],
        ])

    def copy(self) -> 'Mat4':
        return Mat4([row[:] for row in self.m])

    def __matmul__(self, other):
        if isinstance(other, Mat4):
            res = Mat4()
            for r in range(4):
                for c in range(4):
                    val = 0.0
                    for k in range(4):
                        val += self.m[r][k] * other.m[k][c]
                    res.m[r][c] = val
            return res
        return NotImplemented

    def apply(self, p: Point3d) -> Point3d:
        """Transform a point (w = 1)."""
        m = self.m
        return Point3d(
            m[0][0] * p.x + m[0][1] * p.y + m[0][2] * p.z + m[0][3],
            m[1][0] * p.x + m[1][1] * p.y + m[1][2] * p.z + m[1][3],
            m[2][0] * p.x + m[2][1] * p.y + m[2][2] * p.z + m[2][3],
        )


class GraphicsContext(ABC):
    """The drawing operations spheres, curves and scenes rely on."""

    @abstractmethod
    def push_matrix(self) -> None: ...

    @abstractmethod
    def pop_matrix(self) -> None: ...

    @abstractmethod
    def translate(self, x: float, y: float, z: float) -> None: ...

    @abstractmethod
    def scale(self, sx: float, sy: float, sz: float) -> None: ...

    @abstractmethod
    def rotate(self, degrees: float, x: float, y: float, z: float) -> None: ...

    @abstractmethod
    def color(self, rgb: Color) -> None: ...

    @abstractmethod
    def begin_end(self, primitive: str) -> None: ...

    @abstractmethod
    def enable(self, flag: str) -> None: ...

    @abstractmethod
    def disable(self, flag: str) -> None: ...


class MatrixStackContext(GraphicsContext):
    """
    GraphicsContext that keeps the matrix stack, color and enabled flags.

    Subclasses implement draw_primitive().
    """

    def __init__(self):
        self.matrix = Mat4.identity()
        self._stack: List[Mat4] = []
        self.current_color: Color = (255, 255, 255)
        self.flags = set()

    def push_matrix(self) -> None:
        self._stack.append(self.matrix.copy())

    def pop_matrix(self) -> None:
        # IndexError on an unbalanced pop, same as list.pop
        self.matrix = self._stack.pop()

    @property
    def depth(self) -> int:
        return len(self._stack)

    def translate(self, x: float, y: float, z: float) -> None:
        self.matrix = self.matrix @ Mat4.translation(x, y, z)

    def scale(self, sx: float, sy: float, sz: float) -> None:
        self.matrix = self.matrix @ Mat4.scaling(sx, sy, sz)

    def rotate(self, degrees: float, x: float, y: float, z: float) -> None:
        self.matrix = self.matrix @ Mat4.rotation(degrees, x, y, z)

    def color(self, rgb: Color) -> None:
        self.current_color = (int(rgb[0]), int(rgb[1]), int(rgb[2]))

    def enable(self, flag: str) -> None:
        self.flags.add(flag)

    def disable(self, flag: str) -> None:
        self.flags.discard(flag)

    @property
    def lighting(self) -> bool:
        return LIGHTING in self.flags

    def begin_end(self, primitive: str) -> None:
        if primitive not in PRIMITIVES:
            raise ValueError(f"Unknown primitive {primitive!r}")
        self.draw_primitive(primitive, self.matrix.copy(), self.current_color, self.lighting)

    @abstractmethod
    def draw_primitive(self, primitive: str, matrix: Mat4, color: Color, lighting: bool) -> None: ...


class DrawCall(NamedTuple):
    primitive: str
    matrix: Mat4
    color: Color
    lighting: bool

    def origin(self) -> Point3d:
        """World position of the primitive's local origin."""
        return self.matrix.apply(Point3d(0.0, 0.0, 0.0))


class RecordingContext(MatrixStackContext):
    """Headless context that remembers every call, for tests and tooling."""

    def __init__(self):
        super().__init__()
        self.calls: List[Tuple] = []
        self.draws: List[DrawCall] = []

    def push_matrix(self) -> None:
        self.calls.append(("push_matrix",))
        super().push_matrix()

    def pop_matrix(self) -> None:
        self.calls.append(("pop_matrix",))
        super().pop_matrix()

    def translate(self, x: float, y: float, z: float) -> None:
        self.calls.append(("translate", x, y, z))
        super().translate(x, y, z)

    def scale(self, sx: float, sy: float, sz: float) -> None:
        self.calls.append(("scale", sx, sy, sz))
        super().scale(sx, sy, sz)

    def rotate(self, degrees: float, x: float, y: float, z: float) -> None:
        self.calls.append(("rotate", degrees, x, y, z))
        super().rotate(degrees, x, y, z)

    def color(self, rgb: Color) -> None:
        self.calls.append(("color", tuple(rgb)))
        super().color(rgb)

    def enable(self, flag: str) -> None:
        self.calls.append(("enable", flag))
        super().enable(flag)

    def disable(self, flag: str) -> None:
        self.calls.append(("disable", flag))
        super().disable(flag)

    def begin_end(self, primitive: str) -> None:
        self.calls.append(("begin_end", primitive))
        super().begin_end(primitive)

    def draw_primitive(self, primitive: str, matrix: Mat4, color: Color, lighting: bool) -> None:
        self.draws.append(DrawCall(primitive, matrix, color, lighting))

    def primitives(self, name: Optional[str] = None) -> List[DrawCall]:
        if name is None:
            return list(self.draws)
        return [d for d in self.draws if d.primitive == name]
