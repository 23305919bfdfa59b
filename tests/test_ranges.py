# tests/test_ranges.py
import random
from ipaddress import IPv4Address, IPv4Network

import pytest

from hostspec.domain.ranges import (
    SAMPLES_PER_PAIR,
    AddressRange,
    InvalidTokenError,
    cidr_to_range,
    expand_dash_range,
    expand_shorthand,
    is_shorthand,
    sample_slash8,
)
from tests.fakes import HighRandom, LowRandom

FIVE = ["10.0.0.1", "10.0.0.2", "10.0.0.3", "10.0.0.4", "10.0.0.5"]


def test_dash_range_in_numeric_order():
    assert expand_dash_range("10.0.0.1-10.0.0.5") == FIVE


def test_shorthand_matches_full_range():
    assert expand_shorthand("10.0.0.1-5") == expand_dash_range("10.0.0.1-10.0.0.5")


def test_shorthand_detection():
    assert is_shorthand("10.0.0.1-5")
    assert is_shorthand("10.0.0.1-255")
    assert not is_shorthand("10.0.0.1-10.0.0.5")


def test_single_address_range():
    assert expand_shorthand("10.0.0.7-7") == ["10.0.0.7"]
    assert expand_dash_range("10.0.0.7-10.0.0.7") == ["10.0.0.7"]


def test_dash_range_crosses_octet_boundary():
    out = expand_dash_range("10.0.0.254-10.0.1.255")
    assert out[:3] == ["10.0.0.254", "10.0.0.255", "10.0.1.0"]
    assert out[-1] == "10.0.1.255"
    assert len(out) == 258


@pytest.mark.parametrize(
    "token",
    [
        "10.0.0.5-10.0.0.1",  # start > end
        "10.0.1.5-10.0.2.1",  # last octet out of order even though numerically ordered
        "10.0.0.1-10.0.0.300",
        "10.0.0.1-10.0.0",
        "10.0.x.1-10.0.0.5",
    ],
)
def test_dash_range_rejects(token):
    with pytest.raises(InvalidTokenError):
        expand_dash_range(token)


@pytest.mark.parametrize("token", ["10.0.0.5-1", "10.0.0.1-256", "10.0.0-5", "10.0.0.1-", "999.0.0.1-5", "10.0.0.1-5-6"])
def test_shorthand_rejects(token):
    with pytest.raises(InvalidTokenError):
        expand_shorthand(token)


def test_address_range_len_and_str():
    span = AddressRange.parse("192.168.0.0-192.168.255.255")
    assert len(span) == 65536
    assert str(span) == "192.168.0.0-192.168.255.255"


@pytest.mark.parametrize("cidr", ["192.168.1.0/24", "10.1.2.3/30", "172.16.0.0/20", "8.8.8.8/32"])
def test_cidr_range_covers_network(cidr):
    net = IPv4Network(cidr, strict=False)
    out = list(cidr_to_range(cidr))
    assert len(out) == 2 ** (32 - net.prefixlen)
    assert all(IPv4Address(a) in net for a in out)
    assert out[0] == str(net.network_address)
    assert out[-1] == str(net.broadcast_address)


def test_cidr_rejects_garbage():
    with pytest.raises(InvalidTokenError):
        cidr_to_range("10.0.0.0/33")
    with pytest.raises(InvalidTokenError):
        cidr_to_range("10.0.0/24")


def test_slash8_sample_shape():
    out = sample_slash8("10.20.30.40/8", LowRandom())
    assert len(out) == 65536 * SAMPLES_PER_PAIR == 655360
    assert out[:10] == [f"10.0.0.{d}" for d in (1, 2, 4, 5, 6, 56, 101, 151, 201, 254)]
    assert out[-1] == "10.255.255.254"
    net = IPv4Network("10.0.0.0/8")
    assert all(IPv4Address(a) in net for a in out[::997])


def test_slash8_bands_are_inclusive():
    out = sample_slash8("10.0.0.0/8", HighRandom())
    assert out[:10] == [f"10.0.0.{d}" for d in (1, 2, 4, 5, 55, 100, 150, 200, 253, 254)]


def test_slash8_random_offsets_stay_in_bands_and_are_reproducible():
    a = sample_slash8("44.0.0.0/8", random.Random(1234))
    b = sample_slash8("44.0.0.0/8", random.Random(1234))
    assert a == b
    bands = [(6, 55), (56, 100), (101, 150), (151, 200), (201, 253)]
    for pair in range(0, 65536, 4099):
        chunk = a[pair * 10 : pair * 10 + 10]
        for (lo, hi), addr in zip(bands, chunk[4:9]):
            assert lo <= int(addr.rsplit(".", 1)[1]) <= hi


def test_slash8_rejects_bad_base():
    with pytest.raises(InvalidTokenError):
        sample_slash8("300.0.0.0/8", LowRandom())
