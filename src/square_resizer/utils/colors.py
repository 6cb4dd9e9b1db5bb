"""颜色工具函数。"""

from __future__ import annotations

import re
from typing import Sequence, Tuple, Union

from square_resizer.core.exceptions import InvalidConfigurationError

RGBA = Tuple[int, int, int, int]

HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def parse_hex_color(value: str) -> RGBA:
    """将 HEX 字符串解析为 RGBA 四元组，未给出 Alpha 时视为不透明。"""

    if not value:
        raise InvalidConfigurationError("颜色值不能为空")

    match = HEX_COLOR_RE.match(value.strip())
    if not match:
        raise InvalidConfigurationError(f"无法解析颜色值: {value}")

    hex_value = match.group(1)
    if len(hex_value) == 3:
        hex_value = "".join(ch * 2 for ch in hex_value)
    if len(hex_value) == 6:
        hex_value += "ff"

    r = int(hex_value[0:2], 16)
    g = int(hex_value[2:4], 16)
    b = int(hex_value[4:6], 16)
    a = int(hex_value[6:8], 16)
    return r, g, b, a


def parse_color(value: Union[str, Sequence[int]]) -> RGBA:
    """解析配置中的颜色：HEX 字符串或 3/4 个整数分量。"""

    if isinstance(value, str):
        return parse_hex_color(value)

    channels = list(value)
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4:
        raise InvalidConfigurationError(f"颜色分量数量必须为 3 或 4: {value!r}")

    for channel in channels:
        if isinstance(channel, bool) or not isinstance(channel, int):
            raise InvalidConfigurationError(f"颜色分量必须为整数: {value!r}")
        if channel < 0 or channel > 255:
            raise InvalidConfigurationError(f"颜色分量必须在 0-255 范围内: {value!r}")

    r, g, b, a = channels
    return r, g, b, a
