import collections.abc
import dataclasses
import json
import pathlib
import typing

import cattrs
from cattrs.gen import make_dict_structure_fn, override

from .commontypes import ConfigurationError
from .matcher import TargetSequence, parse_code

DEFAULT_SWITCH_ID = 3
DEFAULT_BUTTON_SEQUENCE = "38,38,40,40,37,39,37,39,88,90"

SWITCH_ID_PARAMETER = "SwitchID"
BUTTON_SEQUENCE_PARAMETER = "ButtonSequence"


def parse_switch_id(value: typing.Any) -> int:
    "Missing, non-numeric and zero switch IDs all fall back to the default."
    if value is None:
        return DEFAULT_SWITCH_ID
    try:
        switch_id = int(str(value).strip())
    except ValueError:
        return DEFAULT_SWITCH_ID
    return switch_id or DEFAULT_SWITCH_ID


def structure_target_sequence(v: typing.Union[str, int, list], typ: type[TargetSequence]):
    if isinstance(v, str):
        return TargetSequence.parse(v)
    if isinstance(v, int):
        return TargetSequence((v,))
    if not isinstance(v, (list, tuple)):
        raise ConfigurationError(f"Button sequence must be a string or a list of key codes, got {type(v).__name__}")
    return TargetSequence(item if isinstance(item, int) else parse_code(str(item)) for item in v)


settings_converter = cattrs.Converter()
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v))
settings_converter.register_unstructure_hook(TargetSequence, str)
settings_converter.register_structure_hook(TargetSequence, structure_target_sequence)


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: typing.Optional[pathlib.Path] = None
    switch_id: int = DEFAULT_SWITCH_ID
    button_sequence: TargetSequence = dataclasses.field(default_factory=lambda: TargetSequence.parse(DEFAULT_BUTTON_SEQUENCE))

    def validate(self):
        self.button_sequence.validate()
        if self.switch_id < 1:
            raise ConfigurationError(f"Switch ID must be a positive integer, got {self.switch_id}")
        return self

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        with dest.open("w") as outfile:
            json.dump(raw, outfile, indent=2)

    @classmethod
    def load(cls, src: pathlib.Path):
        with src.open() as infile:
            raw = json.load(infile)
        raw["_path"] = str(src)
        return structure_settings(raw, cls).validate()

    @classmethod
    def from_parameters(cls, parameters: collections.abc.Mapping[str, typing.Any]):
        "Build settings from the host's plugin parameters (SwitchID and ButtonSequence)."
        return structure_settings(
            {
                "switch_id": parameters.get(SWITCH_ID_PARAMETER),
                "button_sequence": parameters.get(BUTTON_SEQUENCE_PARAMETER, DEFAULT_BUTTON_SEQUENCE),
            },
            cls,
        ).validate()

    @classmethod
    def for_test(cls):
        return settings_converter.structure(
            {
                "_path": "test.settings.json",
                "switch_id": DEFAULT_SWITCH_ID,
                "button_sequence": DEFAULT_BUTTON_SEQUENCE,
            },
            cls,
        )


settings_converter.register_structure_hook(
    Settings,
    make_dict_structure_fn(Settings, settings_converter, switch_id=override(struct_hook=lambda v, _: parse_switch_id(v))),
)


def structure_settings(raw: dict, cls: type[Settings]) -> Settings:
    try:
        return settings_converter.structure(raw, cls)
    except cattrs.BaseValidationError as exc:
        causes = "; ".join(str(e) for e in exc.exceptions)
        raise ConfigurationError(f"Invalid settings: {causes}") from exc
