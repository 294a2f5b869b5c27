from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings

from stat_agent import __version__


class Settings(BaseSettings):
    # --- app ---
    app_name: str = "Host Stat Agent"
    version: str = __version__
    debug: bool = False

    # --- counter sources ---
    proc_root: str = "/proc"

    # --- samplers ---
    sample_interval: float = 1.0  # seconds between rate-sampler ticks

    # --- external tools ---
    vnstat: bool = False  # source traffic totals from vnstat instead of /proc/net/dev
    vnstat_path: str = "/usr/bin/vnstat"
    df_path: str = "df"
    disk_fs_types: list[str] = [
        "ext4", "ext3", "ext2", "reiserfs", "jfs", "ntfs",
        "fat32", "btrfs", "fuseblk", "zfs", "simfs", "xfs",
    ]
    tool_timeout: float = 5.0

    # --- interfaces ---
    iface_ignore: list[str] = ["lo", "docker", "vnet", "veth", "vmbr", "kube", "br-"]

    # --- connectivity probe ---
    probe_connectivity: bool = False
    probe_ipv4_host: str = "ipv4.google.com"
    probe_ipv6_host: str = "ipv6.google.com"
    probe_port: int = 80
    probe_timeout: float = 1.0

    # --- failure policy for memory info / vnstat ---
    fatal_policy: Literal["fatal", "degrade"] = "fatal"

    # --- server ---
    host: str = "127.0.0.1"
    port: int = 8000

    model_config = {"env_file": ".env", "env_prefix": "STAT_"}


settings = Settings()
