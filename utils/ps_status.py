"""Process title shown by ps/top for the selected role."""

from __future__ import annotations

import logging

import setproctitle

logger = logging.getLogger(__name__)


def format_ps_display(program_name: str, activity: str, cluster_name: str = "") -> str:
    title = f"{program_name}: {activity}"
    if cluster_name:
        title = f"{program_name}: {cluster_name}: {activity}"
    return title


def set_ps_display(program_name: str, activity: str, ps_cfg: dict) -> bool:
    """Best effort; returns False when the title was left unchanged."""
    if not ps_cfg.get("update_process_title", True):
        return False
    title = format_ps_display(program_name, activity, str(ps_cfg.get("cluster_name") or ""))
    try:
        setproctitle.setproctitle(title)
    except (OSError, ValueError) as e:
        logger.debug("could not set process title: %s", e)
        return False
    return True
