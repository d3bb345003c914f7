import pickle

from zonedtime import Date, months


def test_hash(benchmark):
    d1 = Date(2020, 8, 24)
    benchmark(hash, d1)


def test_new(benchmark):
    benchmark(Date, 2020, 8, 24)


def test_str(benchmark):
    d1 = Date(2020, 8, 24)
    benchmark(str, d1)


def test_add(benchmark):
    d1 = Date(2020, 8, 24)
    benchmark(d1.add, years=-4, months=59, weeks=-7, days=3)


def test_add_span(benchmark):
    d1 = Date(2020, 1, 31)
    span = months(13)
    benchmark(lambda: d1 + span)


def test_diff(benchmark):
    d1 = Date(2020, 2, 29)
    d2 = Date(2025, 2, 28)
    benchmark(lambda: d1 - d2)


def test_iso_week(benchmark):
    d1 = Date(2020, 12, 31)
    benchmark(d1.iso_week)


def test_attributes(benchmark):
    d1 = Date(2020, 8, 24)
    benchmark(lambda: d1.year)


def test_pickle(benchmark):
    d1 = Date(2020, 8, 24)
    benchmark(pickle.dumps, d1)
