"""Unit tests for the data type catalog."""

from pathlib import Path

import pytest

from profcopy.models import DataType, ProfileInfo
from profcopy.registry import (
    check_available_data_types,
    create_selections,
    find_descriptor,
    get_all_descriptors,
    get_descriptor,
    suggest_descriptor,
)


@pytest.mark.unit
class TestCatalog:

    def test_every_data_type_registered_once(self):
        registered = [d.data_type for d in get_all_descriptors()]
        assert len(registered) == len(set(registered))
        assert set(registered) == set(DataType)

    def test_display_order_starts_with_price_and_labor(self):
        first = get_all_descriptors()[:4]
        assert [d.file_name for d in first] == ["SUPPLIER.MAP", "SETUP.MAP", "Cost.MAP", "ETimes.MAP"]
        assert {d.group for d in first} == {"Price & Labor"}

    def test_file_names_are_unique(self):
        names = [d.file_name.casefold() for d in get_all_descriptors()]
        assert len(names) == len(set(names))

    def test_selective_types_have_manifest_keys(self):
        for descriptor in get_all_descriptors():
            if descriptor.supports_selective_cleanup:
                assert descriptor.is_enumerable
                assert descriptor.manifest_key == descriptor.data_type.value

    def test_seams_enumerable_but_not_selective(self):
        seams = get_descriptor(DataType.SEAMS)
        assert seams.is_enumerable is True
        assert seams.supports_selective_cleanup is False
        assert seams.manifest_key == "Seams"

    def test_get_all_returns_a_copy(self):
        descriptors = get_all_descriptors()
        descriptors.clear()
        assert get_all_descriptors()


@pytest.mark.unit
class TestLookup:

    def test_get_descriptor(self):
        assert get_descriptor(DataType.SERVICES).file_name == "service.map"

    @pytest.mark.parametrize("name", ["Services", "services", "SERVICES", "service.map", "SERVICE.MAP"])
    def test_find_descriptor_matches(self, name):
        descriptor = find_descriptor(name)
        assert descriptor is not None
        assert descriptor.data_type is DataType.SERVICES

    def test_find_descriptor_by_display_name(self):
        assert find_descriptor("costs / price lists").data_type is DataType.COSTS

    def test_find_descriptor_by_enum_name(self):
        assert find_descriptor("installation_times").data_type is DataType.INSTALLATION_TIMES

    def test_find_descriptor_unknown(self):
        assert find_descriptor("NotAType") is None


@pytest.mark.unit
class TestSelections:

    def test_create_selections_defaults(self):
        selections = create_selections()
        assert len(selections) == len(get_all_descriptors())
        assert not any(s.is_selected or s.is_available for s in selections)

    def test_create_selections_subset_keeps_order(self):
        descriptors = [get_descriptor(DataType.MATERIALS), get_descriptor(DataType.SERVICES)]
        selections = create_selections(descriptors)
        assert [s.data_type for s in selections] == [DataType.MATERIALS, DataType.SERVICES]

    def test_check_available(self, source_profile: ProfileInfo):
        selections = create_selections([
            get_descriptor(DataType.SERVICES),
            get_descriptor(DataType.SPECIFICATIONS),
        ])
        check_available_data_types(source_profile, selections)
        assert selections[0].is_available is True
        assert selections[1].is_available is False

    def test_check_available_invalid_profile_leaves_flags(self, temp_dir: Path):
        profile = ProfileInfo(name="Gone", path=temp_dir, database_path=temp_dir / "missing")
        selections = create_selections([get_descriptor(DataType.SERVICES)])
        selections[0].is_available = True
        check_available_data_types(profile, selections)
        assert selections[0].is_available is True

    def test_check_available_none_profile(self):
        selections = create_selections([get_descriptor(DataType.SERVICES)])
        check_available_data_types(None, selections)
        assert selections[0].is_available is False


@pytest.mark.unit
class TestSuggestions:

    @pytest.mark.parametrize(
        "typo,expected",
        [("Servces", DataType.SERVICES), ("materal", DataType.MATERIALS), ("SUPPLIER.MP", DataType.SUPPLIERS)],
    )
    def test_close_names_suggested(self, typo, expected):
        assert suggest_descriptor(typo).data_type is expected

    @pytest.mark.parametrize("name", ["Bogus", "", "   "])
    def test_nothing_close(self, name):
        assert suggest_descriptor(name) is None
