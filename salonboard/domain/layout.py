"""
Column-packing layout for appointments that share one board column.

Pure domain logic: the layout is recomputed from the current appointment list
on every render and never cached.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from .models import Appointment
from .overlap import overlaps
from .time_grid import TimeGrid


@dataclass(frozen=True)
class LayoutBox:
    """
    Where an appointment is drawn inside its column.

    ``left_percent`` and ``width_percent`` are fractions of the column width
    (0-100); ``top_px`` and ``height_px`` are measured from the first grid row.
    """
    appointment_id: str
    sub_column_index: int
    sub_column_count: int
    left_percent: float
    width_percent: float
    top_px: float
    height_px: float
    overflows_close: bool = False


class LayoutEngine:
    """
    Places possibly double-booked appointments side by side.

    Algorithm:
    1. Sort by start minute, longer appointments first on ties
    2. Split the sorted run into clusters of transitively overlapping items
    3. First-fit each cluster member into the first lane it does not collide with
    4. Give every member of a cluster the cluster's lane count as its width
    5. Derive vertical placement from start and duration alone
    """

    def __init__(self, grid: TimeGrid, row_height_px: float = 48):
        self.grid = grid
        self.row_height_px = row_height_px

    def calculate(self, appointments: Iterable[Appointment]) -> Dict[str, LayoutBox]:
        """
        Compute the layout of one column.

        Args:
            appointments: Appointments of a single resource/date column

        Returns:
            Dict mapping appointment id to its LayoutBox
        """
        layout: Dict[str, LayoutBox] = {}

        for cluster in self.build_clusters(self.sort_for_layout(appointments)):
            lanes = self.assign_lanes(cluster)
            lane_count = len(lanes)
            width = 100 / lane_count

            for lane_index, lane in enumerate(lanes):
                for appointment in lane:
                    top, height = self.vertical_placement(appointment)
                    layout[appointment.id] = LayoutBox(
                        appointment_id=appointment.id,
                        sub_column_index=lane_index,
                        sub_column_count=lane_count,
                        left_percent=lane_index * width,
                        width_percent=width,
                        top_px=top,
                        height_px=height,
                        overflows_close=appointment.end_minutes > self.grid.grid_end_minutes,
                    )

        return layout

    @staticmethod
    def sort_for_layout(appointments: Iterable[Appointment]) -> List[Appointment]:
        """
        Packing order: start ascending, then duration descending.

        The id is the last key so the order never depends on input order.
        """
        return sorted(
            appointments,
            key=lambda a: (a.start_minutes, -a.duration_minutes, a.id),
        )

    @staticmethod
    def build_clusters(sorted_appointments: List[Appointment]) -> List[List[Appointment]]:
        """
        Split a sorted list into clusters.

        An appointment joins the open cluster when it overlaps any member,
        not only the most recent one; otherwise it opens a new cluster.
        """
        clusters: List[List[Appointment]] = []
        current: List[Appointment] = []

        for appointment in sorted_appointments:
            if not current or any(overlaps(member, appointment) for member in current):
                current.append(appointment)
            else:
                clusters.append(current)
                current = [appointment]

        if current:
            clusters.append(current)

        return clusters

    @staticmethod
    def assign_lanes(cluster: List[Appointment]) -> List[List[Appointment]]:
        """First-fit each appointment into the first lane without a collision."""
        lanes: List[List[Appointment]] = []

        for appointment in cluster:
            for lane in lanes:
                if not any(overlaps(existing, appointment) for existing in lane):
                    lane.append(appointment)
                    break
            else:
                lanes.append([appointment])

        return lanes

    def vertical_placement(self, appointment: Appointment) -> Tuple[float, float]:
        """Return ``(top_px, height_px)``; independent of clustering."""
        granularity = self.grid.granularity_minutes
        top = (appointment.start_minutes - self.grid.open_minutes) / granularity * self.row_height_px
        height = appointment.duration_minutes / granularity * self.row_height_px
        return top, height
