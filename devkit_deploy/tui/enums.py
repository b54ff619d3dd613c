from enum import Enum

from devkit_deploy.models import HostResultStatus


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    DIM = "dim"
    WHITE = "white"


HOST_STATUS_STYLE = {
    HostResultStatus.OK: UIStyle.GREEN.value,
    HostResultStatus.NOOP: UIStyle.DIM.value,
    HostResultStatus.FAILED: UIStyle.RED.value,
}
