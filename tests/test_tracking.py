from core.models import BoundingBox, FaceAttributes
from core.tracking import IdentityTracker, face_centroid


def _face_at(cx, cy, size=0.125):
    # sizes and centres chosen to be exact in binary floating point
    return FaceAttributes(bounding_box=BoundingBox(left=cx - size / 2, top=cy - size / 2, width=size, height=size))


def test_centroid_defaults_to_image_center():
    assert face_centroid(FaceAttributes()) == (0.5, 0.5)
    assert face_centroid(_face_at(0.25, 0.75)) == (0.25, 0.75)


def test_small_moves_keep_identity():
    t = IdentityTracker()
    assert t.assign(_face_at(0.5, 0.5), 0) == "person_1"
    assert t.assign(_face_at(0.52, 0.5), 1) == "person_1"
    assert t.assign(_face_at(0.54, 0.51), 2) == "person_1"
    ident = t.identities["person_1"]
    assert ident.last_seen_frame == 2
    assert abs(ident.cx - 0.54) < 1e-9


def test_far_face_gets_new_identity():
    t = IdentityTracker()
    assert t.assign(_face_at(0.2, 0.5), 0) == "person_1"
    assert t.assign(_face_at(0.8, 0.5), 0) == "person_2"
    assert t.assign(_face_at(0.79, 0.5), 1) == "person_2"
    assert t.assign(_face_at(0.21, 0.5), 1) == "person_1"


def test_threshold_is_strict():
    t = IdentityTracker(distance_threshold=0.125)
    t.assign(_face_at(0.5, 0.5), 0)
    # exactly 0.125 away: not below the threshold
    assert t.assign(_face_at(0.625, 0.5), 1) == "person_2"


def test_staleness_window_retires_identities():
    t = IdentityTracker(stale_frames=300)
    assert t.assign(_face_at(0.5, 0.5), 0) == "person_1"
    assert t.assign(_face_at(0.5, 0.5), 300) == "person_1"
    # 301 frames since last sighting -> ignored
    assert t.assign(_face_at(0.5, 0.5), 601) == "person_2"
    # ids are never reused
    assert t.assign(_face_at(0.1, 0.1), 602) == "person_3"


def test_equal_distance_tie_goes_to_lowest_id():
    t = IdentityTracker()
    assert t.assign(_face_at(0.375, 0.5), 0) == "person_1"
    assert t.assign(_face_at(0.625, 0.5), 0) == "person_2"
    # both identities exactly 0.125 away
    assert t.assign(_face_at(0.5, 0.5), 1) == "person_1"


def test_trackers_are_independent():
    a, b = IdentityTracker(), IdentityTracker()
    a.assign(_face_at(0.5, 0.5), 0)
    a.assign(_face_at(0.1, 0.1), 0)
    assert b.assign(_face_at(0.9, 0.9), 0) == "person_1"
    assert len(a.identities) == 2 and len(b.identities) == 1
