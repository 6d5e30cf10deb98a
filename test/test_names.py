from osm_types.feature_params import FeatureParams
from osm_types.names import NameExtractor, lang_from_key, normalize_name
from osm_types.tags import OsmElement, for_each_tag


def _extract(*tags):
    element = OsmElement(list(tags))
    params = FeatureParams()
    for_each_tag(element, NameExtractor(params))
    return params, element


def test_lang_from_key():
    assert lang_from_key("name") == "default"
    assert lang_from_key("name:en") == "en"
    assert lang_from_key("name:ar1") == "ar"
    assert lang_from_key("int_name") == "int_name"
    assert lang_from_key("name en") == "en"
    assert lang_from_key("old_name") is None
    assert lang_from_key("addr:street") is None
    assert lang_from_key("") is None


def test_first_name_per_language_wins_and_duplicates_are_consumed():
    params, element = _extract(("name:en", "Foo"), ("name:en", "Bar"))
    assert params.name.as_dict() == {"en": "Foo"}
    assert all(tag.consumed for tag in element.tags)


def test_names_are_nfkc_normalized():
    params, _ = _extract(("name", "ﬁle Ⅳ"), ("name:de", "München"))
    assert params.name.get_string("default") == "file IV"
    assert params.name.get_string("de") == "München"
    assert normalize_name("①") == "1"


def test_non_name_and_empty_tags_are_left_alone():
    params, element = _extract(("highway", "primary"), ("name:fr", ""), ("old_name", "X"))
    assert params.name.is_empty()
    assert element.tag_pairs() == [("highway", "primary"), ("name:fr", ""), ("old_name", "X")]


def test_negative_name_value_is_not_a_name():
    params, element = _extract(("name", "no"))
    assert params.name.is_empty()
    assert element.tag_pairs() == [("name", "no")]


def test_int_name_is_its_own_language():
    params, _ = _extract(("int_name", "Moscow"), ("name", "Москва"))
    assert params.name.as_dict() == {"int_name": "Moscow", "default": "Москва"}
