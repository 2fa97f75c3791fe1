"""Shared test fixtures."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from portfolio.config import (
    BuildConfig,
    Config,
    ContentConfig,
    LiveReloadConfig,
    PagesConfig,
    ServerConfig,
    SiteConfig,
)

PROJECT_ROVER = """---
title: Autonomous Rover
term: Fall 2024
description: Six-wheeled rover with ROS 2 navigation.
startDate: 2024-09-01
endDate: 2024-12-15
tags: [ROS 2, C++, Embedded]
github: https://github.com/example/rover
featured: true
status: completed
---

## Overview

Rover body.

## Results

Done.
"""

PROJECT_DRONE = """---
title: Drone Controller
term: Summer 2024
tags: [Rust, PID]
featured: false
---

Drone body.
"""

PROJECT_ARM = """---
title: Robotic Arm
term: Winter 2025
date: 2025-01-10
tags: [Python, Kinematics, Vision, ROS]
featured: true
---

Arm body.
"""

JOB_ACME = """---
title: Embedded Intern
company: Acme Robotics
location: Montreal, QC
term: Summer 2024
startDate: 2024-05-01
endDate: 2024-08-31
technologies: [C, FreeRTOS]
type: internship
featured: true
---

Worked on firmware.
"""

JOB_GLOBEX = """---
title: Software Developer
company: Globex
location: Remote
term: Fall 2023
featured: false
---

Built tools.
"""

EDUCATION_CONCORDIA = """---
institution: Concordia University
degree: B.Eng. Computer Engineering
field: Computer Engineering
term: Fall 2021
gpa: "3.9"
coursework: [Control Systems, Embedded Systems]
---
"""

VOLUNTEER_FOOD = """---
title: Food Bank Helper
organization: Moisson Montreal
term: Winter 2023
---

Sorted donations.
"""

EXTRACURRICULAR_HACK = """---
title: ConUHacks
term: Winter 2024
type: competition
description: 24-hour hackathon.
link: https://conuhacks.io
award: First place
---

Hackathon body.
"""


def write_content(content_dir: Path, category: str, slug: str, text: str) -> Path:
    """Write a content file under content_dir/category/slug.mdx."""
    directory = content_dir / category
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{slug}.mdx"
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """Create a content store with a few items per category."""
    content = tmp_path / "content"
    content.mkdir(exist_ok=True)
    write_content(content, "projects", "rover", PROJECT_ROVER)
    write_content(content, "projects", "drone", PROJECT_DRONE)
    write_content(content, "projects", "arm", PROJECT_ARM)
    write_content(content, "jobs", "acme", JOB_ACME)
    write_content(content, "jobs", "globex", JOB_GLOBEX)
    write_content(content, "education", "concordia", EDUCATION_CONCORDIA)
    write_content(content, "volunteer", "food-bank", VOLUNTEER_FOOD)
    write_content(content, "extracurricular", "conuhacks", EXTRACURRICULAR_HACK)
    return content


@pytest.fixture
def test_config(tmp_path: Path, content_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories.

    Live reload is disabled so no file watcher is started.
    """
    return Config(
        server=ServerConfig(),
        content=ContentConfig(source_dir=content_dir, cache_dir=tmp_path / ".cache"),
        build=BuildConfig(output_dir=tmp_path / "dist"),
        live_reload=LiveReloadConfig(enabled=False),
        pages=PagesConfig(),
        site=SiteConfig(),
    )


@pytest.fixture
async def make_client() -> AsyncIterator:
    """Factory starting a TestClient for an application; clients are closed on teardown."""
    clients: list[TestClient] = []

    async def _make(app: web.Application) -> TestClient:
        client = TestClient(TestServer(app))
        await client.start_server()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.close()
