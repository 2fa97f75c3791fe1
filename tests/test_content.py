"""Tests for content loader."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from portfolio.core.content import (
    ContentLoader,
    EducationFrontmatter,
    Frontmatter,
    ProjectFrontmatter,
    only_featured,
    sort_by_term,
    take,
)
from portfolio.core.frontmatter import ContentError
from portfolio.core.types import Category

from tests.conftest import PROJECT_DRONE, write_content


@pytest.fixture
def loader(content_dir: Path) -> ContentLoader:
    return ContentLoader(content_dir)


class TestGetItems:
    """Tests for ContentLoader.get_items() and the list accessors."""

    def test__projects__sorted_newest_term_first(self, loader: ContentLoader) -> None:
        """Sort by year descending, then Summer > Winter > Fall."""
        projects = loader.get_projects()

        assert [p.slug for p in projects] == ["arm", "drone", "rover"]

    def test__missing_category_dir__returns_empty_list(self, tmp_path: Path) -> None:
        """Return empty list when the category directory doesn't exist."""
        loader = ContentLoader(tmp_path / "nothing")

        assert loader.get_projects() == []

    def test__same_term__keeps_file_name_order(self, tmp_path: Path) -> None:
        """Items with equal terms keep file name order."""
        content = tmp_path / "content"
        for slug in ("b-second", "a-first", "c-third"):
            write_content(content, "projects", slug, PROJECT_DRONE)

        loader = ContentLoader(content)

        assert [p.slug for p in loader.get_projects()] == ["a-first", "b-second", "c-third"]

    def test__unknown_season__sorts_after_known_seasons(self, tmp_path: Path) -> None:
        """Unknown season sorts as 0 within its year."""
        content = tmp_path / "content"
        write_content(
            content, "projects", "odd", "---\ntitle: Odd\nterm: Spring 2024\ntags: []\n---\n"
        )
        write_content(
            content, "projects", "fall", "---\ntitle: Fall\nterm: Fall 2024\ntags: []\n---\n"
        )

        loader = ContentLoader(content)

        assert [p.slug for p in loader.get_projects()] == ["fall", "odd"]

    def test__md_and_mdx__both_loaded(self, tmp_path: Path) -> None:
        """Load both .md and .mdx files, ignore other extensions."""
        content = tmp_path / "content"
        write_content(content, "projects", "one", PROJECT_DRONE)
        (content / "projects" / "two.md").write_text(PROJECT_DRONE)
        (content / "projects" / "notes.txt").write_text("ignore me")

        loader = ContentLoader(content)

        assert sorted(loader.get_all_project_slugs()) == ["one", "two"]

    def test__duplicate_slug__raises_content_error(self, tmp_path: Path) -> None:
        """Raise ContentError when .md and .mdx share a stem."""
        content = tmp_path / "content"
        write_content(content, "projects", "dup", PROJECT_DRONE)
        (content / "projects" / "dup.md").write_text(PROJECT_DRONE)

        loader = ContentLoader(content)

        with pytest.raises(ContentError, match="duplicate slug 'dup'"):
            loader.get_projects()

    def test__missing_required_field__raises_content_error(self, tmp_path: Path) -> None:
        """Raise ContentError naming the file and field."""
        content = tmp_path / "content"
        path = write_content(content, "jobs", "broken", "---\ntitle: Dev\nterm: Fall 2024\n---\n")

        loader = ContentLoader(content)

        with pytest.raises(ContentError, match="missing required field 'company'") as exc_info:
            loader.get_jobs()
        assert exc_info.value.path == path

    def test__invalid_choice__raises_content_error(self, tmp_path: Path) -> None:
        """Raise ContentError for values outside the allowed set."""
        content = tmp_path / "content"
        write_content(
            content,
            "extracurricular",
            "bad",
            "---\ntitle: Bad\nterm: Fall 2024\ntype: party\n---\n",
        )

        loader = ContentLoader(content)

        with pytest.raises(ContentError, match="'type' must be one of"):
            loader.get_extracurricular()

    def test__invalid_start_date__raises_content_error(self, tmp_path: Path) -> None:
        """Raise ContentError for dates that can't be parsed."""
        content = tmp_path / "content"
        write_content(
            content,
            "projects",
            "bad-date",
            "---\ntitle: X\nterm: Fall 2024\ntags: []\nstartDate: sometime\n---\n",
        )

        loader = ContentLoader(content)

        with pytest.raises(ContentError, match="'startDate' is not a valid date"):
            loader.get_projects()


class TestFrontmatterMapping:
    """Tests for typed front-matter records."""

    def test__subclass_without_from_dict__cannot_be_instantiated(self) -> None:
        """Every category record must implement from_dict."""

        @dataclass(frozen=True, kw_only=True)
        class IncompleteFrontmatter(Frontmatter):
            title: str

        with pytest.raises(TypeError, match="from_dict"):
            IncompleteFrontmatter(term="Fall 2024", title="Draft")

    def test__project__maps_camel_case_fields(self, loader: ContentLoader) -> None:
        """Map authored camelCase keys onto typed fields."""
        rover = loader.get_project_by_slug("rover")

        assert rover is not None
        fm = rover.frontmatter
        assert isinstance(fm, ProjectFrontmatter)
        assert fm.title == "Autonomous Rover"
        assert fm.start_date == "2024-09-01"
        assert fm.end_date == "2024-12-15"
        assert fm.tags == ("ROS 2", "C++", "Embedded")
        assert fm.featured is True
        assert fm.status == "completed"

    def test__project__legacy_date_used_as_start_date(self, loader: ContentLoader) -> None:
        """Fall back to "date" when "startDate" is absent."""
        arm = loader.get_project_by_slug("arm")

        assert arm is not None
        assert arm.frontmatter.start_date == "2025-01-10"

    def test__unknown_keys__kept_in_extra(self, tmp_path: Path) -> None:
        """Keep unknown front-matter keys and serialize them back."""
        content = tmp_path / "content"
        write_content(
            content,
            "volunteer",
            "v",
            "---\ntitle: V\norganization: Org\nterm: Fall 2024\nhours: 40\n---\n",
        )

        item = ContentLoader(content).get_volunteer_by_slug("v")

        assert item is not None
        assert item.frontmatter.extra == {"hours": 40}
        assert item.frontmatter.to_dict()["hours"] == 40

    def test__to_dict__uses_authored_keys(self, loader: ContentLoader) -> None:
        """Serialize front-matter with camelCase keys and lists."""
        rover = loader.get_project_by_slug("rover")

        assert rover is not None
        data = rover.to_dict()
        assert data["slug"] == "rover"
        assert data["frontmatter"]["startDate"] == "2024-09-01"
        assert data["frontmatter"]["tags"] == ["ROS 2", "C++", "Embedded"]
        assert "## Overview" in data["content"]

    def test__education__summary_includes_gpa(self, loader: ContentLoader) -> None:
        """Combine field of study and GPA."""
        item = loader.get_education_by_slug("concordia")

        assert item is not None
        assert isinstance(item.frontmatter, EducationFrontmatter)
        assert item.frontmatter.summary == "Computer Engineering • GPA: 3.9"


class TestGetBySlug:
    """Tests for slug lookups."""

    def test__every_slug__resolves_to_exactly_one_item(self, loader: ContentLoader) -> None:
        """Each listed slug loads the item with that slug."""
        for category in Category:
            for slug in loader.get_slugs(category):
                item = loader.get_item(category, slug)
                assert item is not None
                assert item.slug == slug

    def test__unknown_slug__returns_none(self, loader: ContentLoader) -> None:
        """Signal absence with None."""
        assert loader.get_project_by_slug("nope") is None
        assert loader.get_extracurricular_by_slug("nope") is None

    def test__extracurricular_accessors(self, loader: ContentLoader) -> None:
        """Look up extracurricular items by slug and list their slugs."""
        assert loader.get_all_extracurricular_slugs() == ["conuhacks"]

        item = loader.get_extracurricular_by_slug("conuhacks")
        assert item is not None
        assert item.frontmatter.award == "First place"

    def test__slugs__file_name_order(self, loader: ContentLoader) -> None:
        """List slugs in file name order."""
        assert loader.get_all_project_slugs() == ["arm", "drone", "rover"]
        assert loader.get_all_job_slugs() == ["acme", "globex"]
        assert loader.get_all_education_slugs() == ["concordia"]
        assert loader.get_all_volunteer_slugs() == ["food-bank"]


class TestGetTimeline:
    """Tests for ContentLoader.get_timeline()."""

    def test__timeline__sorted_oldest_term_first(self, loader: ContentLoader) -> None:
        """Sort ascending by term; ties keep category order."""
        titles = [item.title for item in loader.get_timeline()]

        assert titles == [
            "B.Eng. Computer Engineering",
            "Software Developer",
            "Autonomous Rover",
            "ConUHacks",
            "Drone Controller",
            "Embedded Intern",
            "Robotic Arm",
        ]

    def test__timeline__excludes_volunteer(self, loader: ContentLoader) -> None:
        """Volunteer work is not part of the timeline."""
        types = {item.type for item in loader.get_timeline()}

        assert types == {"project", "job", "education", "extracurricular"}

    def test__project_entry__subtitle_from_first_three_tags(self, loader: ContentLoader) -> None:
        """Join the first three tags with a bullet."""
        arm = next(item for item in loader.get_timeline() if item.slug == "arm")

        assert arm.subtitle == "Python • Kinematics • Vision"
        assert arm.link == "/projects/arm"

    def test__job_entry__maps_company_and_technologies(self, loader: ContentLoader) -> None:
        """Use company as subtitle and technologies as tags."""
        job = next(
            item for item in loader.get_timeline() if item.type == "job" and item.term == "Summer 2024"
        )

        assert job.subtitle == "Acme Robotics"
        assert job.tags == ("C", "FreeRTOS")
        assert job.link == "/experience/acme"

    def test__education_entry__maps_degree_and_summary(self, loader: ContentLoader) -> None:
        """Use degree as title and field plus GPA as description."""
        edu = next(item for item in loader.get_timeline() if item.type == "education")

        assert edu.title == "B.Eng. Computer Engineering"
        assert edu.subtitle == "Concordia University"
        assert edu.description == "Computer Engineering • GPA: 3.9"
        assert edu.tags == ("Control Systems", "Embedded Systems")

    def test__extracurricular_entry__uses_external_link(self, loader: ContentLoader) -> None:
        """Link extracurricular entries to their front-matter link."""
        entry = next(item for item in loader.get_timeline() if item.type == "extracurricular")

        assert entry.subtitle == "24-hour hackathon."
        assert entry.link == "https://conuhacks.io"

    def test__to_dict__uses_end_date_key(self, loader: ContentLoader) -> None:
        """Serialize end_date as endDate."""
        rover = next(item for item in loader.get_timeline() if item.slug == "rover")

        data = rover.to_dict()
        assert data["date"] == "2024-09-01"
        assert data["endDate"] == "2024-12-15"
        assert data["tags"] == ["ROS 2", "C++", "Embedded"]


class TestSelection:
    """Tests for featured filter and truncation helpers."""

    def test__only_featured__keeps_relative_order(self, loader: ContentLoader) -> None:
        """Keep only featured items, in loader order."""
        featured = only_featured(loader.get_projects())

        assert [p.slug for p in featured] == ["arm", "rover"]
        assert all(p.featured for p in featured)

    def test__get_featured_projects__matches_only_featured(self, loader: ContentLoader) -> None:
        """Featured accessor applies the featured filter."""
        assert [p.slug for p in loader.get_featured_projects()] == ["arm", "rover"]

    def test__take__returns_first_n(self) -> None:
        """Return the first n items."""
        assert take([1, 2, 3, 4], 2) == [1, 2]

    def test__take__shorter_source__returns_all(self) -> None:
        """Return every item when the source has fewer than n."""
        assert take([1, 2], 5) == [1, 2]

    def test__take__zero__returns_empty(self) -> None:
        assert take([1, 2], 0) == []

    def test__take__negative__raises_value_error(self) -> None:
        """Reject negative counts."""
        with pytest.raises(ValueError, match="negative"):
            take([1, 2], -1)

    def test__sort_by_term__oldest_first(self, loader: ContentLoader) -> None:
        """Sort ascending when newest_first is False."""
        projects = sort_by_term(loader.get_projects(), newest_first=False)

        assert [p.slug for p in projects] == ["rover", "drone", "arm"]
