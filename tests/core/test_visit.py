"""
Unit Tests for Photo and Visit models.
"""

from datetime import date

import pytest

from visit_report.core.models import DEFAULT_ASPECT_RATIO, OutlineLine, Photo, Visit


class TestPhoto:
    """Tests for Photo dataclass."""

    def test_photo_when_empty_id_then_raises(self):
        with pytest.raises(ValueError, match="id"):
            Photo("")

    def test_photo_when_non_positive_width_then_raises(self):
        with pytest.raises(ValueError, match="width"):
            Photo("p1", width=0, height=10)

    def test_aspect_ratio_when_unknown_then_four_by_three(self):
        assert Photo("p1").aspect_ratio == DEFAULT_ASPECT_RATIO

    def test_aspect_ratio_when_known_then_uses_size(self):
        assert Photo("p1", width=300, height=600).aspect_ratio == 0.5

    def test_from_dict_when_optional_fields_missing_then_defaults(self):
        photo = Photo.from_dict({"id": "p1"})

        assert photo == Photo("p1")


class TestVisit:
    """Tests for Visit dataclass."""

    def test_missing_identity_fields_when_complete_then_empty(self, sample_visit):
        assert sample_visit.missing_identity_fields() == []

    def test_missing_identity_fields_when_blank_then_listed_in_order(self, visit_factory):
        visit = visit_factory(client_name="  ", visit_date=None, prepared_by="")

        assert visit.missing_identity_fields() == ["Client name", "Visit date", "Prepared by"]

    def test_visit_when_lists_given_then_stored_as_tuples(self, visit_factory):
        visit = visit_factory(observations=[OutlineLine("A")], photos=[Photo("p1")])

        assert isinstance(visit.observations, tuple)
        assert isinstance(visit.photos, tuple)

    def test_photo_count_matches_photos(self, sample_visit, photo_visit):
        assert sample_visit.photo_count == 0
        assert photo_visit.photo_count == 3

    def test_visit_is_immutable(self, sample_visit):
        with pytest.raises(AttributeError):
            sample_visit.client_name = "Other"

    def test_to_dict_when_serialized_then_camel_case_keys(self, sample_visit):
        data = sample_visit.to_dict()

        assert data["clientName"] == "Acme Co"
        assert data["visitDate"] == "2024-01-15"
        assert data["observations"] == "Crack in wall\n\tminor\nLeak detected"

    def test_from_dict_when_timestamp_date_then_parses_date_part(self):
        visit = Visit.from_dict({
            "id": "v1",
            "clientName": "Acme",
            "siteName": "Plant",
            "projectNo": "P1",
            "visitDate": "2024-01-15T09:30:00.000Z",
            "preparedBy": "J. Doe",
        })

        assert visit.visit_date == date(2024, 1, 15)
        assert visit.observations == ()

    def test_from_dict_when_bad_date_then_raises(self):
        with pytest.raises(ValueError):
            Visit.from_dict({"visitDate": "15/01/2024"})
