# どこで: `src/canvas_recorder/core/runtime_config.py`。
# 何を: config.yaml（同梱デフォルト + 探索 + 明示指定）を重ねて読み、録画の出力先とプレビュー設定を返す。
# なぜ: アーカイブの保存先やプレビューウィンドウ位置を、コードを変えずにユーザーが差し替えられるようにするため。

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

CONFIG_VERSION = 1
_PACKAGED_SOURCE = "canvas_recorder/resource/default_config.yaml"


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """canvas_recorder の実行時設定。

    Notes
    -----
    `config_path` は同梱デフォルト以外で実際に読んだ config のうち最も優先度が高いもの。
    """

    config_path: Path | None
    output_dir: Path
    archive_filename: str
    preview_window_position: tuple[int, int]
    preview_caption: str


_explicit_path: Path | None = None
_cached: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """明示 config パスを設定し、キャッシュを捨てる。`None` で明示指定を解除する。"""

    global _explicit_path, _cached
    _explicit_path = None if path is None else Path(str(path)).expanduser()
    _cached = None


def _discovered_config_path() -> Path | None:
    for candidate in (
        Path.cwd() / ".canvas_recorder" / "config.yaml",
        Path.home() / ".config" / "canvas_recorder" / "config.yaml",
    ):
        if candidate.is_file():
            return candidate
    return None


def _parse_yaml(text: str, *, source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml を YAML として解釈できません: source={source}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml のトップレベルは mapping である必要があります: source={source}")
    return dict(data)


def _packaged_defaults() -> dict[str, Any]:
    try:
        text = resources.files("canvas_recorder").joinpath("resource", "default_config.yaml").read_text(
            encoding="utf-8"
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(
            f"同梱設定 {_PACKAGED_SOURCE} を読めません（package-data に含まれているか確認してください）"
        ) from exc
    return _parse_yaml(text, source=_PACKAGED_SOURCE)


def _layers(explicit: Path | None, discovered: Path | None) -> Iterator[dict[str, Any]]:
    """優先度の低い順に config の中身を返す。"""

    yield _packaged_defaults()
    for path in (discovered, explicit):
        if path is not None:
            yield _parse_yaml(path.read_text(encoding="utf-8"), source=str(path))


def _section(payload: Mapping[str, Any], dotted: str) -> Mapping[str, Any]:
    node: Any = payload
    for part in dotted.split("."):
        node = node.get(part) if isinstance(node, Mapping) else None
        if node is None:
            return {}
        if not isinstance(node, Mapping):
            raise RuntimeError(f"{dotted} は mapping である必要があります: got={node!r}")
    return node


def _require(value: Any, *, key: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def _parse_version(value: Any) -> int:
    _require(value, key="version")
    try:
        version = int(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={value!r}") from exc
    if version != CONFIG_VERSION:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")
    return version


def _parse_dir(value: Any, *, key: str) -> Path:
    text = str(_require(value, key=key)).strip()
    return Path(os.path.expandvars(os.path.expanduser(text)))


def _parse_filename(value: Any, *, key: str) -> str:
    name = str(_require(value, key=key)).strip()
    if Path(name).name != name:
        raise ValueError(f"{key} はディレクトリを含まないファイル名である必要があります: got={value!r}")
    return name


def _parse_position(value: Any, *, key: str) -> tuple[int, int]:
    _require(value, key=key)
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)) or len(value) != 2:
        raise RuntimeError(f"{key} は [x, y] の 2 要素配列である必要があります: got={value!r}")
    try:
        return int(value[0]), int(value[1])
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} の要素は整数である必要があります: got={value!r}") from exc


def _build(payload: Mapping[str, Any], *, config_path: Path | None) -> RuntimeConfig:
    _parse_version(payload.get("version"))
    paths = _section(payload, "paths")
    archive = _section(payload, "export.archive")
    preview = _section(payload, "preview")
    return RuntimeConfig(
        config_path=config_path,
        output_dir=_parse_dir(paths.get("output_dir"), key="paths.output_dir"),
        archive_filename=_parse_filename(archive.get("filename"), key="export.archive.filename"),
        preview_window_position=_parse_position(
            preview.get("window_position"), key="preview.window_position"
        ),
        preview_caption=str(preview.get("caption") or "canvas-recorder"),
    )


def runtime_config() -> RuntimeConfig:
    """実行時設定を返す。

    Notes
    -----
    上書き順（後勝ち、トップレベルキー単位）:
    1) 同梱 default_config.yaml
    2) `./.canvas_recorder/config.yaml`、無ければ `~/.config/canvas_recorder/config.yaml`
    3) `set_config_path(...)` で指定した config

    結果は `set_config_path()` が呼ばれるまでキャッシュする。
    """

    global _cached
    if _cached is not None:
        return _cached

    explicit = _explicit_path
    if explicit is not None and not explicit.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit}")
    discovered = _discovered_config_path()

    payload: dict[str, Any] = {}
    for layer in _layers(explicit, discovered):
        payload.update(layer)

    _cached = _build(payload, config_path=explicit or discovered)
    return _cached


def output_root_dir() -> Path:
    """出力ファイルを保存するルートディレクトリを返す。"""

    return Path(runtime_config().output_dir)


__all__ = ["CONFIG_VERSION", "RuntimeConfig", "output_root_dir", "runtime_config", "set_config_path"]
