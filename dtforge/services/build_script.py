"""
Build script text assembly.

Renders the clone recipe for a device: one `git clone` per declared
repository in declaration order, followed by fixed note blocks for the
kernel toolchain, external modules and known patches. Pure and
deterministic, no I/O.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from dtforge.models.device import DeviceConfig
from dtforge.models.repository import DeviceRepository

KERNEL_VENDOR = "xiaomi"
CLANG_RELEASES_URL = "https://github.com/ZyCromerZ/Clang/releases"

ANT_WIRELESS_MODULES: tuple[str, ...] = ("ant_client", "ant_native", "ant_service")
ANT_SERVICE_FIX_URL = (
    "https://github.com/LineageOS/android_external_ant-wireless_ant_service/commit/"
    "808676c8bf84dddec22c76fdff880e6e394c366e"
)
RECOVERY_PATCH_COMMIT = "74a50ca6db16ac4c6b7353e9d50f035e19891ff8"


@dataclass(frozen=True)
class BuildScriptOptions:
    """User-supplied strings substituted into the fixed note blocks."""

    manifest: str
    kernel_branch: str
    kernel_clang: str
    owner: str  # Account hosting the kernel tree and recovery fork
    web_url: str = "https://github.com"


def recovery_patches(options: BuildScriptOptions) -> list[str]:
    """Known recovery patch references recorded alongside a script."""
    return [
        f"{options.web_url}/{options.owner}/android_bootable_recovery/commit/"
        f"{RECOVERY_PATCH_COMMIT}"
    ]


def recipe_name(device: DeviceConfig) -> str:
    """Artifact name, e.g. daisy_23.0_recipe for lineage-23.0."""
    return f"{device.codename}_{device.lineage_version.replace('lineage-', '')}_recipe"


def render_build_script(
    device: DeviceConfig,
    repositories: Sequence[DeviceRepository],
    options: BuildScriptOptions,
) -> str:
    """Render the clone recipe text for a device."""
    platform = device.platform
    lines: list[str] = [f"# manifest is from {options.manifest}", ""]

    for repo in repositories:
        lines.append(
            f"git clone --depth={repo.depth} --branch {repo.branch} {repo.url} {repo.path}"
        )
    lines.append("")

    # Kernel
    lines += [
        "# NOTE:",
        "# kernel tree",
        f"# git clone --depth=1 --branch {options.kernel_branch} "
        f"{options.web_url}/{options.owner}/android_kernel_{KERNEL_VENDOR}_{platform}/ "
        f"kernel/{KERNEL_VENDOR}/{platform}",
        "",
        f"# for the kernel use {options.kernel_clang}, so yes external clang",
        f"# {CLANG_RELEASES_URL}",
        "# extract and then add its path to TARGET_KERNEL_CLANG_PATH on "
        f"device/{KERNEL_VENDOR}/{platform}-common/BoardConfigCommon.mk",
        "",
    ]

    # External modules
    lines.append(
        "# -- add these too and remove /external on build/soong/ui/build/androidmk_denylist.go"
    )
    for module in ANT_WIRELESS_MODULES:
        lines.append(
            f"git clone --depth=1 https://github.com/LineageOS/"
            f"android_external_ant-wireless_{module}.git external/ant-wireless/{module}"
        )
    lines += [
        "",
        "# apply this fix on external/ant-wireless/ant_service",
        f"# {ANT_SERVICE_FIX_URL}",
        "",
    ]

    # Recovery
    lines += [
        "# for recovery, add bypasses",
        "# apply on bootable/recovery",
        *(f"# {url}" for url in recovery_patches(options)),
    ]

    return "\n".join(lines) + "\n"
