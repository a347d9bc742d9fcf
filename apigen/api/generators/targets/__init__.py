"""Built-in targets, in registration order (first per language is its default)."""

from .java_spring import SpringBootGenerator
from .kotlin_spring import KotlinSpringGenerator
from .go_gin import GinGenerator
from .go_chi import ChiGenerator
from .rust_axum import AxumGenerator
from .csharp_aspnet import AspNetCoreGenerator
from .php_laravel import LaravelGenerator
from .python_fastapi import FastApiGenerator
from .typescript_nestjs import NestJsGenerator

TARGETS = [
    SpringBootGenerator,
    KotlinSpringGenerator,
    GinGenerator,
    ChiGenerator,
    AxumGenerator,
    AspNetCoreGenerator,
    LaravelGenerator,
    FastApiGenerator,
    NestJsGenerator,
]

__all__ = [
    "TARGETS",
    "SpringBootGenerator",
    "KotlinSpringGenerator",
    "GinGenerator",
    "ChiGenerator",
    "AxumGenerator",
    "AspNetCoreGenerator",
    "LaravelGenerator",
    "FastApiGenerator",
    "NestJsGenerator",
]
