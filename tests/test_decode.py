from siap.domain.decode import decode_school, decode_visit


def test_decode_visit_splits_joined_lists_and_applies_defaults():
    visit = decode_visit(
        {
            "id": "VK-ABC123",
            "schoolName": "SDN 01 Menteng",
            "date": "2026-03-02",
            "type": "Kurikulum Merdeka",
            "keyFindings": "Guru aktif, Perpustakaan rapi",
            "agreedActions": "",
            "locationVerified": "TRUE",
            "distanceMeter": "183.6",
        }
    )
    assert visit.key_findings == ("Guru aktif", "Perpustakaan rapi")
    assert visit.agreed_actions == ()
    assert visit.empathy_metrics.school_climate == 3
    assert visit.time == ""
    assert visit.location_verified is True
    assert visit.distance_meter == 184
    assert visit.status == "Submitted"
    assert visit.location is None


def test_decode_visit_keeps_lists_and_legacy_category():
    visit = decode_visit(
        {
            "id": "VK-1",
            "schoolName": "SMP Harapan",
            "date": "2025-11-20",
            "jam": "08:15",
            "type": "Supervisi Lama",
            "keyFindings": ["a", "a"],
            "agreedActions": ["b"],
            "empathyMetrics": {"schoolClimate": 5, "teacherEngagement": 4, "leadershipVibe": 2},
            "location": {"latitude": "-6.2", "longitude": "106.8", "accuracy": 12},
            "status": "Archived",
            "link_pdf": "https://example.test/report.pdf",
        }
    )
    assert visit.type == "Supervisi Lama"
    assert visit.key_findings == ("a", "a")
    assert visit.empathy_metrics.leadership_vibe == 2
    assert visit.location.latitude == -6.2
    assert visit.status == "Archived"
    assert visit.pdf_link == "https://example.test/report.pdf"
    assert visit.to_wire()["link_pdf"] == "https://example.test/report.pdf"


def test_decode_school_coerces_blank_and_string_coordinates():
    a = decode_school({"id": "1", "npsn": "201", "name": "A", "latitude": "-6,2", "longitude": "106.8"})
    b = decode_school({"id": "2", "npsn": "202", "name": "B", "latitude": "", "longitude": None})
    assert a.latitude == -6.2 and a.has_coordinate
    assert b.latitude is None and not b.has_coordinate


def test_decode_visit_defaults_blank_or_out_of_range_scores():
    visit = decode_visit(
        {
            "id": "VK-2",
            "empathyMetrics": {"schoolClimate": "", "teacherEngagement": "4", "leadershipVibe": 0},
            "location": {"latitude": 120, "longitude": 106.8, "accuracy": -5},
        }
    )
    metrics = visit.empathy_metrics
    assert (metrics.school_climate, metrics.teacher_engagement, metrics.leadership_vibe) == (3, 4, 3)
    assert visit.location is None

    visit = decode_visit({"id": "VK-3", "location": {"latitude": "-6.2", "longitude": "106.8", "accuracy": -5}})
    assert visit.location.accuracy is None


def test_decode_school_drops_out_of_range_coordinates():
    school = decode_school({"id": "3", "name": "C", "latitude": "-95", "longitude": "106.8"})
    assert school.latitude is None and not school.has_coordinate
