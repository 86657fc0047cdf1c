"""Shared fixtures for the district_levels tests."""

import matplotlib

matplotlib.use('Agg')

import pytest


@pytest.fixture
def clustered_values():
    """Three well separated groups of three values each."""
    return [1, 2, 3, 10, 11, 12, 50, 51, 52]


@pytest.fixture
def clustered_features(clustered_values):
    """GeoJSON-like features carrying the clustered values plus unusable ones."""
    features = [
        {'id': f'cd{i}', 'type': 'Feature', 'properties': {'snap': value}}
        for i, value in enumerate(clustered_values)
    ]
    features += [
        {'id': 'zero', 'type': 'Feature', 'properties': {'snap': 0}},
        {'id': 'missing', 'type': 'Feature', 'properties': {}},
        {'id': 'null', 'type': 'Feature', 'properties': {'snap': None}},
        {'id': 'text', 'type': 'Feature', 'properties': {'snap': 'n/a'}},
        {'id': 'no_props', 'type': 'Feature'},
    ]
    return features
