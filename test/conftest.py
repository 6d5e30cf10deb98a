import pytest

from osm_types.classificator import load_classificator
from osm_types.osm2type import TagClassifier
from osm_types.tags import OsmElement


@pytest.fixture(scope="session")
def classificator():
    return load_classificator()


@pytest.fixture(scope="session")
def classifier(classificator):
    return TagClassifier(classificator)


@pytest.fixture
def type_of(classificator):
    def resolve(*path):
        return classificator.get_type_by_path(path)
    return resolve


@pytest.fixture
def classify(classifier):
    def run(*tags):
        element = OsmElement(list(tags))
        return classifier.get_name_and_type(element), element
    return run
