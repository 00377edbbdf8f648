from typing import Optional

from rich.console import Console

from ..config import ProviderConfig, TranslatorName
from .base import Translator
from .dictionaryapi import DictionaryApi
from .ecdict import Ecdict
from .google import Google
from .youdao import Youdao


def translator_class(name: TranslatorName) -> type:
    name = TranslatorName(name)
    if name is TranslatorName.YOUDAO:
        return Youdao
    if name is TranslatorName.GOOGLE:
        return Google
    if name is TranslatorName.DICTIONARYAPI:
        return DictionaryApi
    if name is TranslatorName.ECDICT:
        return Ecdict
    raise ValueError(f"Unknown translator: {name}")


def build_translator(
    name: TranslatorName,
    settings: Optional[ProviderConfig] = None,
    console: Optional[Console] = None,
) -> Translator:
    return translator_class(name)(settings, console)
