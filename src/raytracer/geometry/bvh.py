# geometry/bvh.py
from typing import List, Optional
from raytracer.core.aabb import AABB
from raytracer.geometry.hittable import HitRecord, closer

MAX_LEAF_SIZE = 4
MAX_BIN_COUNT = 16
TRAVERSAL_COST = 0.125


class BVHNode:
    """
    Bounding volume hierarchy over a list of primitives, built with a binned
    surface area heuristic.

    The input list is not reordered. Leaves keep up to ``MAX_LEAF_SIZE``
    primitives; hits are merged with ``closer`` so equal-distance ties resolve
    to the lowest insertion index regardless of tree shape.
    """
    def __init__(self, objects: list, max_bin_count: int = MAX_BIN_COUNT):
        objects = list(objects)
        self.box = objects[0].bounding_box()
        for obj in objects[1:]:
            self.box = AABB.surrounding_box(self.box, obj.bounding_box())

        self.left: Optional["BVHNode"] = None
        self.right: Optional["BVHNode"] = None
        self.objects: List = []

        if len(objects) <= MAX_LEAF_SIZE:
            self.objects = objects
            return

        split = self._find_split(objects, max_bin_count)
        if split is None:
            self.objects = objects
            return

        left_objects, right_objects = split
        self.left = BVHNode(left_objects, max_bin_count)
        self.right = BVHNode(right_objects, max_bin_count)

    @property
    def is_leaf(self) -> bool:
        return self.left is None

    def _find_split(self, objects: list, max_bin_count: int):
        # Binned SAH over object centroids on each axis; falls back to a
        # median split on the widest axis when no bin boundary helps.
        boxes = [obj.bounding_box() for obj in objects]
        centroids = [[box.centroid(axis) for axis in range(3)] for box in boxes]
        parent_area = self.box.surface_area()

        best_cost = float('inf')
        best = None

        for axis in range(3):
            c_min = min(c[axis] for c in centroids)
            c_max = max(c[axis] for c in centroids)
            if c_max - c_min < 1e-9:
                continue

            bin_count = min(max_bin_count, len(objects))
            bin_width = (c_max - c_min) / bin_count
            bin_of = [min(bin_count - 1, int((c[axis] - c_min) / bin_width)) for c in centroids]

            counts = [0] * bin_count
            bin_boxes = [None] * bin_count
            for idx, b in enumerate(bin_of):
                counts[b] += 1
                bin_boxes[b] = boxes[idx] if bin_boxes[b] is None else AABB.surrounding_box(bin_boxes[b], boxes[idx])

            # Prefix sweeps: left_area[i] covers bins [0, i], right_area[i] covers bins [i, end).
            left_area, left_count = [0.0] * bin_count, [0] * bin_count
            box, count = None, 0
            for i in range(bin_count):
                if bin_boxes[i] is not None:
                    box = bin_boxes[i] if box is None else AABB.surrounding_box(box, bin_boxes[i])
                count += counts[i]
                left_area[i] = box.surface_area() if box is not None else 0.0
                left_count[i] = count

            right_area, right_count = [0.0] * bin_count, [0] * bin_count
            box, count = None, 0
            for i in range(bin_count - 1, -1, -1):
                if bin_boxes[i] is not None:
                    box = bin_boxes[i] if box is None else AABB.surrounding_box(box, bin_boxes[i])
                count += counts[i]
                right_area[i] = box.surface_area() if box is not None else 0.0
                right_count[i] = count

            for i in range(1, bin_count):
                n_left, n_right = left_count[i - 1], right_count[i]
                if n_left == 0 or n_right == 0:
                    continue
                if parent_area > 0:
                    cost = TRAVERSAL_COST + (n_left * left_area[i - 1] + n_right * right_area[i]) / parent_area
                else:
                    cost = TRAVERSAL_COST + max(n_left, n_right)
                if cost < best_cost:
                    best_cost = cost
                    best = (axis, i, bin_of)

        if best is not None and best_cost < len(objects):
            axis, split_bin, bin_of = best
            left = [obj for obj, b in zip(objects, bin_of) if b < split_bin]
            right = [obj for obj, b in zip(objects, bin_of) if b >= split_bin]
            return left, right

        axis = max(range(3), key=self.box.extent)
        order = sorted(range(len(objects)), key=lambda i: (centroids[i][axis], i))
        mid = len(objects) // 2
        return [objects[i] for i in order[:mid]], [objects[i] for i in order[mid:]]

    def hit(self, ray, t_min: float, t_max: float, intersect=None) -> Optional[HitRecord]:
        """
        Nearest hit below this node. ``intersect(obj, ray, t_min, t_max)`` lets
        the scene wrap primitive tests; it defaults to ``obj.hit``.
        """
        if not self.box.hit(ray, t_min, t_max):
            return None

        if self.is_leaf:
            best = None
            for obj in self.objects:
                limit = best.t if best is not None else t_max
                rec = intersect(obj, ray, t_min, limit) if intersect else obj.hit(ray, t_min, limit)
                best = closer(best, rec)
            return best

        hit_left = self.left.hit(ray, t_min, t_max, intersect)

        # Shrink the interval for the right branch; hits at exactly this t
        # are still reported so ``closer`` can apply the tie-break.
        if hit_left is not None:
            t_max = hit_left.t

        hit_right = self.right.hit(ray, t_min, t_max, intersect)
        return closer(hit_left, hit_right)

    def depth(self) -> int:
        if self.is_leaf:
            return 1
        return 1 + max(self.left.depth(), self.right.depth())
