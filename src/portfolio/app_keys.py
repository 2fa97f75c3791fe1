"""Application keys for type-safe app configuration access."""

from pathlib import Path

from aiohttp import web

from portfolio.config import SiteConfig
from portfolio.core.content import ContentLoader
from portfolio.core.renderer import BodyRenderer
from portfolio.views import PageViews

loader_key = web.AppKey("loader", ContentLoader)
renderer_key = web.AppKey("renderer", BodyRenderer)
views_key = web.AppKey("views", PageViews)
site_key = web.AppKey("site", SiteConfig)
static_dir_key = web.AppKey("static_dir", Path)
verbose_key = web.AppKey("verbose", bool)
live_reload_enabled_key = web.AppKey("live_reload_enabled", bool)
