from cnnct.status.availability import fits_availability, time_slots
from cnnct.status.buckets import BucketBoard, assign_buckets, upcoming_view
from cnnct.status.classify import classify
from cnnct.status.matching import matches, normalize_identity, resolve_identity, similarity
from cnnct.status.transitions import apply

__all__ = [
    "BucketBoard",
    "apply",
    "assign_buckets",
    "classify",
    "fits_availability",
    "matches",
    "normalize_identity",
    "resolve_identity",
    "similarity",
    "time_slots",
    "upcoming_view",
]
