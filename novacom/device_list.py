"""USB vendor/product identifiers of devices that speak the protocol."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UsbDeviceId:
    """A known USB device: vendor id, product id and a device type name."""

    vendor: int
    product: int
    name: str


def _family(vendor: int, products: tuple[int, ...]) -> tuple[UsbDeviceId, ...]:
    return tuple(UsbDeviceId(vendor, product, "") for product in products)


DEVICE_TABLE: tuple[UsbDeviceId, ...] = (
    UsbDeviceId(0x0830, 0x1000, "unknown-bootie"),
    # castle
    UsbDeviceId(0x0830, 0x0101, "castle-linux"),
    UsbDeviceId(0x0830, 0x8001, "castle-bootie"),
    UsbDeviceId(0x0830, 0x8002, "castle-linux"),
    UsbDeviceId(0x05AC, 0x0101, "castle-linux"),
    UsbDeviceId(0x05AC, 0x1209, "castle-linux"),
    UsbDeviceId(0x05AC, 0x8002, "castle-linux"),
    UsbDeviceId(0x05AC, 0x8003, "castle-linux"),
    UsbDeviceId(0x05AC, 0x8004, "castle-linux"),
    UsbDeviceId(0x05AC, 0x8012, "castle-linux"),
    UsbDeviceId(0x0830, 0x8003, "castle-linux"),
    UsbDeviceId(0x0830, 0x8004, "castle-linux"),
    UsbDeviceId(0x0830, 0x8006, "castle-linux"),
    UsbDeviceId(0x0830, 0x8007, "castle-linux"),
    # pixie
    UsbDeviceId(0x0830, 0x8011, "pixie-bootie"),
    UsbDeviceId(0x0830, 0x8012, "pixie-linux"),
    UsbDeviceId(0x0830, 0x8016, "pixie-linux"),
    UsbDeviceId(0x0830, 0x8017, "pixie-linux"),
    UsbDeviceId(0x0830, 0x0103, "pixie-linux"),
    # zepfloyd
    UsbDeviceId(0x0830, 0xC001, "zepfloyd-bootie"),
    UsbDeviceId(0x0830, 0xC002, "zepfloyd-linux"),
    # product id bases 0x20 .. 0x90
    *_family(0x0830, (0x8021, 0x8022, 0x8026, 0x8027, 0x0105)),
    *_family(0x0830, (0x8031, 0x8032, 0x8036, 0x8037, 0x0107)),
    *_family(0x0830, (0x8041, 0x8042, 0x8046, 0x8047)),
    *_family(0x0830, (0x8051, 0x8052, 0x8056, 0x8057)),
    *_family(0x0830, (0x8061, 0x8062, 0x8066, 0x8067)),
    *_family(0x0830, (0x8071, 0x8072, 0x8076, 0x8077)),
    *_family(0x0830, (0x8081, 0x8082, 0x8086, 0x8087)),
    *_family(0x0830, (0x8091, 0x8092, 0x8096, 0x8097)),
    # vendor 0x03F0, product id bases 1x28 .. 5x28
    *_family(0x03F0, (0x1128, 0x1228, 0x1628, 0x1728, 0x1928, 0x1A28, 0x1E28, 0x1F28)),
    *_family(0x03F0, (0x2128, 0x2228, 0x2628, 0x2728, 0x2928, 0x2A28, 0x2E28, 0x2F28)),
    *_family(0x03F0, (0x3128, 0x3228, 0x3628, 0x3728, 0x3928, 0x3A28, 0x3E28, 0x3F28)),
    *_family(0x03F0, (0x4128, 0x4228, 0x4628, 0x4728, 0x4928, 0x4A28, 0x4E28, 0x4F28)),
    *_family(0x03F0, (0x5128, 0x5228, 0x5628, 0x5728, 0x5928, 0x5A28, 0x5E28, 0x5F28)),
)


def lookup(vendor: int, product: int) -> UsbDeviceId | None:
    """The first table entry matching the vendor and product ids, if any."""
    return next(
        (entry for entry in DEVICE_TABLE if entry.vendor == vendor and entry.product == product),
        None,
    )