# Python 3.5
from __future__ import division

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from . import type_code
from .classificator import Classificator
from .feature_params import FeatureParams
from .matcher import match_types
from .names import NameExtractor
from .rules import Rule, action, apply_rules
from .tags import OsmElement, Tag, for_each_tag

MetadataProcessor = Callable[[FeatureParams, Tag], None]
CityRule = Tuple[str, str, str]

METADATA_KEYS = frozenset([
    "opening_hours",
    "cuisine",
    "stars",
    "phone",
    "website",
    "operator",
    "internet_access",
    "wheelchair",
    "ele",
])

# Exact network/operator strings, first match wins.
SUBWAY_CITY_RULES = [
    ("network", "London Underground", "london"),
    ("network", "New York City Subway", "newyork"),
    ("network", "Московский метрополитен", "moscow"),
    ("network", "Петербургский метрополитен", "spb"),
    ("network", "Verkehrsverbund Berlin-Brandenburg", "berlin"),
    ("network", "Минский метрополитен", "minsk"),

    ("network", "Київський метрополітен", "kiev"),
    ("operator", "КП «Київський метрополітен»", "kiev"),

    ("network", "RATP", "paris"),
    ("network", "Metro de Barcelona", "barcelona"),

    ("network", "Metro de Madrid", "madrid"),
    ("operator", "Metro de Madrid", "madrid"),

    ("network", "Metropolitana di Roma", "roma"),
    ("network", "ATAC", "roma"),
]  # type: List[CityRule]

RAILWAY_STATION_CITY_RULES = [
    ("network", "London Underground", "london"),
]  # type: List[CityRule]


def collect_metadata(params: FeatureParams, tag: Tag) -> None:
    if tag.key in METADATA_KEYS and tag.value:
        params.metadata[tag.key] = tag.value


class CachedTypes(object):
    ENTRANCE = ("entrance",)
    HIGHWAY = ("highway",)
    ADDRESS = ("building", "address")
    ONEWAY = ("hwtag", "oneway")
    PRIVATE = ("hwtag", "private")
    LIT = ("hwtag", "lit")
    NOFOOT = ("hwtag", "nofoot")
    YESFOOT = ("hwtag", "yesfoot")
    RW_STATION = ("railway", "station")
    RW_STATION_SUBWAY = ("railway", "station", "subway")

    def __init__(self, classificator: Classificator) -> None:
        self.entrance = classificator.get_type_by_path(self.ENTRANCE)
        self.highway = classificator.get_type_by_path(self.HIGHWAY)
        self.address = classificator.get_type_by_path(self.ADDRESS)
        self.oneway = classificator.get_type_by_path(self.ONEWAY)
        self.private = classificator.get_type_by_path(self.PRIVATE)
        self.lit = classificator.get_type_by_path(self.LIT)
        self.nofoot = classificator.get_type_by_path(self.NOFOOT)
        self.yesfoot = classificator.get_type_by_path(self.YESFOOT)
        self.rw_station = classificator.get_type_by_path(self.RW_STATION)
        self.rw_station_subway = classificator.get_type_by_path(self.RW_STATION_SUBWAY)

        self.subway_cities = {}  # type: Dict[str, int]
        subway = classificator.find_node(self.RW_STATION_SUBWAY)
        for city in subway.children if subway is not None else ():
            self.subway_cities[city.name] = type_code.push_value(self.rw_station_subway, city.index)

    def is_highway(self, code: int) -> bool:
        return type_code.truncate(code, 1) == self.highway

    def is_rw_station(self, code: int) -> bool:
        return code == self.rw_station

    def is_rw_subway(self, code: int) -> bool:
        return type_code.truncate(code, 3) == self.rw_station_subway


class TagClassifier(object):
    """Turns the tags of one element into a FeatureParams record.

    Holds only read-only state, so one instance serves any number of threads.
    """

    def __init__(self, classificator: Classificator,
                 metadata_processor: Optional[MetadataProcessor] = collect_metadata) -> None:
        self.classificator = classificator
        self.types = CachedTypes(classificator)
        self.metadata_processor = metadata_processor

    def get_name_and_type(self, element: OsmElement) -> FeatureParams:
        params = FeatureParams()

        self._preprocess_layer(element)

        # Names in all languages.
        for_each_tag(element, NameExtractor(params))

        self._apply_base_rules(element, params)

        match_types(element, params, self.classificator)

        self._fix_address(params)
        self._apply_type_rules(element, params)

        params.finish_adding_types()

        if self.metadata_processor is not None:
            self._hand_off_metadata(element, params, self.metadata_processor)
        return params

    def _add(self, params: FeatureParams, code: int) -> None:
        params.add_type(code, self.classificator.is_drawable)

    def _preprocess_layer(self, element: OsmElement) -> None:
        has_layer = False
        layer = None  # type: Optional[str]

        def bridge() -> None:
            nonlocal layer
            layer = "1"

        def tunnel() -> None:
            nonlocal layer
            layer = "-1"

        def found_layer() -> None:
            nonlocal has_layer
            has_layer = True

        apply_rules(element, [
            Rule("bridge", "yes", action(bridge)),
            Rule("tunnel", "yes", action(tunnel)),
            Rule("layer", "*", action(found_layer)),
        ])
        if not has_layer and layer is not None:
            element.add_tag("layer", layer)

    def _apply_base_rules(self, element: OsmElement, params: FeatureParams) -> None:
        def relabel(key: str) -> Callable[[Tag], None]:
            # atm=yes becomes amenity=atm
            def run(tag: Tag) -> None:
                tag.key, tag.value = key, tag.key
            return run

        def house_name(tag: Tag) -> None:
            params.add_house_name(tag.value)
            tag.consume()

        def street(tag: Tag) -> None:
            params.add_street_address(tag.value)
            tag.consume()

        def flats(tag: Tag) -> None:
            params.flats = tag.value
            tag.consume()

        def house_number(tag: Tag) -> None:
            # Treat "numbers" like names if it's not an actual number.
            if not params.add_house_number(tag.value):
                params.add_house_name(tag.value)
            tag.consume()

        def population(tag: Tag) -> None:
            params.set_population(tag.value)
            tag.consume()

        def ref(tag: Tag) -> None:
            # Road numbers.
            params.ref = tag.value
            tag.consume()

        def layer(tag: Tag) -> None:
            params.set_layer(tag.value)

        apply_rules(element, [
            Rule("atm", "yes", relabel("amenity")),
            Rule("restaurant", "yes", relabel("amenity")),
            Rule("hotel", "yes", relabel("tourism")),
            Rule("addr:housename", "*", house_name),
            Rule("addr:street", "*", street),
            Rule("addr:flats", "*", flats),
            Rule("addr:housenumber", "*", house_number),
            Rule("population", "*", population),
            Rule("ref", "*", ref),
            Rule("layer", "*", layer),
        ])

    def _fix_address(self, params: FeatureParams) -> None:
        # Keep "entrance" only for refs. An addressed entrance gets the
        # "address" type instead so it stays drawable.
        if params.has_address() and params.pop_exact_type(self.types.entrance):
            params.name.clear()
            self._add(params, self.types.address)

    def _highway_rules(self, params: FeatureParams) -> List[Rule]:
        types = self.types

        def add(code: int) -> Callable[[Tag], None]:
            return action(lambda: self._add(params, code))

        def reverse_oneway(tag: Tag) -> None:
            self._add(params, types.oneway)
            params.reverse_geometry = True

        return [
            Rule("oneway", "yes", add(types.oneway)),
            Rule("oneway", "1", add(types.oneway)),
            Rule("oneway", "-1", reverse_oneway),

            Rule("access", "private", add(types.private)),

            Rule("lit", "~", add(types.lit)),

            Rule("foot", "!", add(types.nofoot)),

            Rule("foot", "~", add(types.yesfoot)),
            Rule("sidewalk", "~", add(types.yesfoot)),
        ]

    def _city_rules(self, params: FeatureParams, table: Sequence[CityRule]) -> List[Rule]:
        fired = False

        def set_city(city: str) -> Callable[[Tag], None]:
            def run(tag: Tag) -> None:
                nonlocal fired
                if fired:
                    return
                fired = True
                self.set_rw_subway_type(params, city)
            return run

        return [Rule(key, value, set_city(city)) for key, value, city in table]

    def set_rw_subway_type(self, params: FeatureParams, city: str) -> None:
        code = self.types.subway_cities.get(city)
        if code is not None:
            self._add(params, code)

    def _apply_type_rules(self, element: OsmElement, params: FeatureParams) -> None:
        types = self.types
        highway_done = False
        subway_done = False
        railway_done = False

        # Copy, the rules below add types.
        source_types = list(params.types)
        # A subway station never gets the generic station rules.
        has_subway = any(types.is_rw_subway(code) for code in source_types)

        for code in source_types:
            if not highway_done and types.is_highway(code):
                apply_rules(element, self._highway_rules(params))
                highway_done = True
            elif not subway_done and types.is_rw_subway(code):
                apply_rules(element, self._city_rules(params, SUBWAY_CITY_RULES))
                subway_done = True
            elif not has_subway and not railway_done and types.is_rw_station(code):
                apply_rules(element, self._city_rules(params, RAILWAY_STATION_CITY_RULES))
                railway_done = True

    def _hand_off_metadata(self, element: OsmElement, params: FeatureParams,
                           processor: MetadataProcessor) -> None:
        def visit(pos: int, tag: Tag) -> None:
            processor(params, tag)
        for_each_tag(element, visit)
