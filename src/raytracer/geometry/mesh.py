# geometry/mesh.py
import logging
from typing import List, Tuple, Optional
from raytracer.core.vector import Vector3
from raytracer.core.uv import UV
from raytracer.core.ray import Ray
from raytracer.core.aabb import AABB
from raytracer.geometry.hittable import Hittable, HitRecord
from raytracer.errors import DegeneratePrimitiveError, SceneFileError

logger = logging.getLogger(__name__)

# Squared length of the edge cross product below which a triangle has no area.
MIN_TRIANGLE_AREA_SQ = 1e-24
# |det| below which a ray is treated as parallel to the triangle plane.
PARALLEL_EPSILON = 1e-12


class Triangle(Hittable):
    """Represents a single triangle in 3D space with texture coordinates."""
    def __init__(self,
                 v0: Vector3, v1: Vector3, v2: Vector3,
                 material=None,
                 uv0: Optional[UV] = None, uv1: Optional[UV] = None, uv2: Optional[UV] = None,
                 n0: Optional[Vector3] = None, n1: Optional[Vector3] = None, n2: Optional[Vector3] = None):
        if not (v0.is_finite() and v1.is_finite() and v2.is_finite()):
            raise DegeneratePrimitiveError(f"Triangle vertices must be finite: {v0}, {v1}, {v2}")

        self.v0 = v0
        self.v1 = v1
        self.v2 = v2
        self.material = material

        self.edge1 = v1 - v0
        self.edge2 = v2 - v0
        cross = self.edge1.cross(self.edge2)
        if cross.length_squared() < MIN_TRIANGLE_AREA_SQ:
            raise DegeneratePrimitiveError(f"Triangle has zero area: {v0}, {v1}, {v2}")
        face_normal = cross.normalize()

        # UV coordinates (default to basic mapping if not provided)
        self.uv0 = uv0 if uv0 is not None else UV(0.0, 0.0)
        self.uv1 = uv1 if uv1 is not None else UV(1.0, 0.0)
        self.uv2 = uv2 if uv2 is not None else UV(0.5, 1.0)

        # Vertex normals that are missing or have no direction fall back to the face normal
        self.face_normal = face_normal
        if any(n is None or not n.is_finite() or n.length_squared() == 0 for n in (n0, n1, n2)):
            self.n0 = self.n1 = self.n2 = face_normal
            self.smooth = False
        else:
            self.n0 = n0.normalize()
            self.n1 = n1.normalize()
            self.n2 = n2.normalize()
            self.smooth = True

    def interpolate_uv(self, u: float, v: float) -> UV:
        """Interpolate UV coordinates at the given barycentric coordinates."""
        w = 1.0 - u - v
        return UV(
            w * self.uv0.u + u * self.uv1.u + v * self.uv2.u,
            w * self.uv0.v + u * self.uv1.v + v * self.uv2.v
        )

    def get_normal(self, u: float, v: float) -> Vector3:
        """Interpolate normal at the given barycentric coordinates."""
        if not self.smooth:
            return self.n0
        w = 1.0 - u - v
        normal = self.n0 * w + self.n1 * u + self.n2 * v
        if normal.length_squared() == 0:
            return self.face_normal
        return normal.normalize()

    def hit(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        # Möller–Trumbore intersection algorithm
        h = ray.direction.cross(self.edge2)
        a = self.edge1.dot(h)

        # If ray is parallel to triangle
        if abs(a) < PARALLEL_EPSILON:
            return None

        f = 1.0 / a
        s = ray.origin - self.v0
        u = f * s.dot(h)
        if u < 0.0 or u > 1.0:
            return None

        q = s.cross(self.edge1)
        v = f * ray.direction.dot(q)
        if v < 0.0 or u + v > 1.0:
            return None

        t = f * self.edge2.dot(q)
        if t < t_min or t > t_max:
            return None

        rec = self._make_record(ray, t, self.get_normal(u, v))
        rec.uv = self.interpolate_uv(u, v)
        return rec

    def bounding_box(self) -> AABB:
        """Compute the bounding box for the triangle."""
        min_x = min(self.v0.x, self.v1.x, self.v2.x)
        min_y = min(self.v0.y, self.v1.y, self.v2.y)
        min_z = min(self.v0.z, self.v1.z, self.v2.z)
        max_x = max(self.v0.x, self.v1.x, self.v2.x)
        max_y = max(self.v0.y, self.v1.y, self.v2.y)
        max_z = max(self.v0.z, self.v1.z, self.v2.z)
        return AABB(Vector3(min_x, min_y, min_z), Vector3(max_x, max_y, max_z))

    def __repr__(self) -> str:
        return f"Triangle({self.v0!r}, {self.v1!r}, {self.v2!r})"


class TriangleMesh:
    """
    A group of triangles sharing one material. Adding a mesh to a scene adds
    each triangle as its own primitive, in order.
    """
    def __init__(self, triangles: List[Triangle], material):
        self.triangles = triangles
        self.material = material
        for triangle in self.triangles:
            triangle.material = material

    def translate(self, offset: Vector3) -> "TriangleMesh":
        moved = [
            Triangle(tri.v0 + offset, tri.v1 + offset, tri.v2 + offset, self.material,
                     tri.uv0, tri.uv1, tri.uv2,
                     *((tri.n0, tri.n1, tri.n2) if tri.smooth else (None, None, None)))
            for tri in self.triangles
        ]
        return TriangleMesh(moved, self.material)

    def scale(self, factor: float) -> "TriangleMesh":
        scaled = [
            Triangle(tri.v0 * factor, tri.v1 * factor, tri.v2 * factor, self.material,
                     tri.uv0, tri.uv1, tri.uv2,
                     *((tri.n0, tri.n1, tri.n2) if tri.smooth else (None, None, None)))
            for tri in self.triangles
        ]
        return TriangleMesh(scaled, self.material)

    def __len__(self) -> int:
        return len(self.triangles)


def _resolve_index(token: str, count: int) -> int:
    # OBJ indices are 1-based; negative ones count back from the last element read so far.
    i = int(token)
    if i > 0:
        return i - 1
    if i < 0 and count + i >= 0:
        return count + i
    raise ValueError(f"index {i} out of range for {count} elements")


def _parse_face_vertex(vertex_str: str, n_vertices: int, n_uvs: int,
                       n_normals: int) -> Tuple[int, Optional[int], Optional[int]]:
    indices = vertex_str.split('/')
    v_idx = _resolve_index(indices[0], n_vertices)
    t_idx = _resolve_index(indices[1], n_uvs) if len(indices) > 1 and indices[1] else None
    n_idx = _resolve_index(indices[2], n_normals) if len(indices) > 2 and indices[2] else None
    return v_idx, t_idx, n_idx


def load_obj(filename: str, material) -> TriangleMesh:
    """
    Load a triangle mesh from a Wavefront OBJ file.

    Polygons are fan-triangulated (assumed convex). Degenerate faces are
    skipped with a warning rather than failing the whole file.

    Raises:
        SceneFileError: If the file cannot be read or a line is malformed.
    """
    vertices: List[Vector3] = []
    normals: List[Vector3] = []
    uvs: List[UV] = []
    triangles: List[Triangle] = []
    skipped = 0

    logger.info("Loading OBJ mesh %s", filename)
    try:
        f = open(filename, 'r')
    except OSError as err:
        raise SceneFileError(f"Cannot open mesh file {filename}: {err}") from err

    with f:
        for line_num, line in enumerate(f, 1):
            values = line.split()
            if not values or values[0].startswith('#'):
                continue
            try:
                if values[0] == 'v':
                    vertices.append(Vector3(float(values[1]), float(values[2]), float(values[3])))
                elif values[0] == 'vn':
                    normals.append(Vector3(float(values[1]), float(values[2]), float(values[3])))
                elif values[0] == 'vt':
                    uvs.append(UV(float(values[1]), float(values[2])))
                elif values[0] == 'f':
                    vertex_data = [_parse_face_vertex(v, len(vertices), len(uvs), len(normals))
                                   for v in values[1:]]
                    for i in range(1, len(vertex_data) - 1):
                        corners = (vertex_data[0], vertex_data[i], vertex_data[i + 1])
                        v0, v1, v2 = (vertices[c[0]] for c in corners)
                        uv0, uv1, uv2 = (uvs[c[1]] if c[1] is not None and uvs else None for c in corners)
                        if all(c[2] is not None for c in corners) and normals:
                            n0, n1, n2 = (normals[c[2]] for c in corners)
                        else:
                            n0 = n1 = n2 = None
                        try:
                            triangles.append(Triangle(v0, v1, v2, material, uv0, uv1, uv2, n0, n1, n2))
                        except DegeneratePrimitiveError:
                            skipped += 1
            except (ValueError, IndexError) as err:
                raise SceneFileError(f"{filename}:{line_num}: malformed OBJ line {line.strip()!r}: {err}") from err

    if skipped:
        logger.warning("Skipped %d degenerate faces in %s", skipped, filename)
    logger.info("Loaded %d vertices, %d normals, %d UVs, %d triangles",
                len(vertices), len(normals), len(uvs), len(triangles))
    return TriangleMesh(triangles, material)
