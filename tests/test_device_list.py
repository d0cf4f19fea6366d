import pytest

from novacom.device_list import DEVICE_TABLE, UsbDeviceId, lookup


def test_legacy_bootie():
    assert lookup(0x0830, 0x1000) == UsbDeviceId(0x0830, 0x1000, "unknown-bootie")


@pytest.mark.parametrize(
    "vendor, product, name",
    [
        (0x05AC, 0x1209, "castle-linux"),
        (0x0830, 0x8001, "castle-bootie"),
        (0x0830, 0x8011, "pixie-bootie"),
        (0x0830, 0xC002, "zepfloyd-linux"),
    ],
)
def test_named_entries(vendor, product, name):
    entry = lookup(vendor, product)
    assert entry is not None
    assert entry.name == name


def test_unnamed_entry_has_empty_name():
    entry = lookup(0x03F0, 0x5F28)
    assert entry is not None
    assert entry.name == ""


def test_unknown_device():
    assert lookup(0x0830, 0x0000) is None
    assert lookup(0x1234, 0x1000) is None


def test_every_entry_found_by_its_ids():
    for entry in DEVICE_TABLE:
        assert lookup(entry.vendor, entry.product) == entry


def test_lookups_give_distinct_ids():
    found = [lookup(entry.vendor, entry.product) for entry in DEVICE_TABLE]
    pairs = {(item.vendor, item.product) for item in found}
    assert len(pairs) == len(DEVICE_TABLE)