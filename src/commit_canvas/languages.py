"""Per-language content templates used to fill synthesized commits.

Each supported language is one ``LanguageTemplate`` record in ``TEMPLATES``.
The set is closed: ``Language`` enumerates every identifier the schedule
normalizer accepts, and every member has exactly one template.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from commit_canvas.logging import get_logger
from commit_canvas.models import LanguageWeight

logger = get_logger("languages")

PROJECT_LINK = "[commit-canvas](https://github.com/commit-canvas/commit-canvas)"


class Language(str, Enum):
    MARKDOWN = "markdown"
    JAVA = "java"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    GO = "go"
    RUST = "rust"
    CPP = "cpp"
    C = "c"
    CSHARP = "csharp"
    PHP = "php"
    RUBY = "ruby"
    SWIFT = "swift"
    KOTLIN = "kotlin"
    SHELL = "shell"
    VUE = "vue"
    HTML = "html"
    CSS = "css"
    SCSS = "scss"
    SQL = "sql"


@dataclass(frozen=True)
class LanguageTemplate:
    """Content capabilities for one language."""

    language: Language
    display_name: str
    extension: str
    activity_file: str
    code: str
    structure: tuple[str, ...] = ()
    support_files: dict[str, str] = field(default_factory=dict)
    readme_override: Callable[[str], str] | None = None

    def generate_code(self, day: datetime.date, commit_num: int, total_commits: int) -> str:
        """Render the activity file body for one commit."""
        return _render_template(
            self.code,
            {
                "CLASS": f"Contribution_{day:%Y_%m_%d}_{commit_num}",
                "DATE": day.isoformat(),
                "NUM": str(commit_num),
                "TOTAL": str(total_commits),
            },
        )

    def readme(self, repo_name: str) -> str:
        if self.readme_override is not None:
            return self.readme_override(repo_name)
        lines = [
            f"# {repo_name}",
            "",
            f"A {self.display_name} project generated with {PROJECT_LINK}.",
            "",
            "## About",
            "",
            f"This repository contains automatically generated {self.display_name} contribution records.",
            "",
        ]
        if self.structure:
            lines.extend(["## Structure", ""])
            lines.extend(f"- {entry}" for entry in self.structure)
            lines.append("")
        lines.extend(["## License", "", "MIT License", ""])
        return "\n".join(lines)

    def additional_files(self, repo_name: str) -> dict[str, str]:
        return {
            path: _render_template(body, {"REPO": repo_name})
            for path, body in self.support_files.items()
        }


def _render_template(template: str, replacements: dict[str, str]) -> str:
    """Replace ``{{TOKEN}}`` placeholders in a template string."""
    rendered = template
    for token, value in replacements.items():
        rendered = rendered.replace(f"{{{{{token}}}}}", value)
    return rendered


def _markdown_readme(repo_name: str) -> str:
    return f"# {repo_name}\n\nGenerated with {PROJECT_LINK}.\n"


NODE_GITIGNORE = "node_modules/\ndist/\n.env\n.DS_Store\n"

TEMPLATES: dict[Language, LanguageTemplate] = {
    Language.MARKDOWN: LanguageTemplate(
        language=Language.MARKDOWN,
        display_name="Markdown",
        extension=".md",
        activity_file="activity.md",
        code="{{DATE}} commit {{NUM}}\n",
        readme_override=_markdown_readme,
    ),
    Language.JAVA: LanguageTemplate(
        language=Language.JAVA,
        display_name="Java",
        extension=".java",
        activity_file="src/main/java/Activity.java",
        code="""/**
 * Contribution record for {{DATE}}.
 * Commit {{NUM}} of {{TOTAL}}.
 */
public class Activity {
    private final String date = "{{DATE}}";
    private final int commitNumber = {{NUM}};
    private final int totalCommits = {{TOTAL}};

    public String getDate() {
        return date;
    }

    public int getCommitNumber() {
        return commitNumber;
    }

    public String describe() {
        return "Contribution on " + date + " (" + commitNumber + "/" + totalCommits + ")";
    }

    public static void main(String[] args) {
        System.out.println(new Activity().describe());
    }
}
""",
        structure=("`src/main/java/` - Java sources", "`pom.xml` - Maven build file"),
        support_files={
            "pom.xml": """<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.example</groupId>
  <artifactId>{{REPO}}</artifactId>
  <version>1.0.0</version>
</project>
""",
            ".gitignore": "target/\n*.class\n.idea/\n",
        },
    ),
    Language.PYTHON: LanguageTemplate(
        language=Language.PYTHON,
        display_name="Python",
        extension=".py",
        activity_file="activity.py",
        code='''"""Contribution record for {{DATE}} (commit {{NUM}} of {{TOTAL}})."""

from dataclasses import dataclass


@dataclass
class Activity:
    date: str = "{{DATE}}"
    commit_number: int = {{NUM}}
    total_commits: int = {{TOTAL}}

    def describe(self) -> str:
        return f"Contribution on {self.date} ({self.commit_number}/{self.total_commits})"

    def is_last(self) -> bool:
        return self.commit_number == self.total_commits


if __name__ == "__main__":
    activity = Activity()
    print(activity.describe())
    print("last of the day" if activity.is_last() else "more to come")
''',
        structure=("`activity.py` - activity record", "`requirements.txt` - dependencies"),
        support_files={
            "requirements.txt": "",
            ".gitignore": "__pycache__/\n*.pyc\n.venv/\n",
        },
    ),
    Language.JAVASCRIPT: LanguageTemplate(
        language=Language.JAVASCRIPT,
        display_name="JavaScript",
        extension=".js",
        activity_file="src/activity.js",
        code="""// Contribution record for {{DATE}}
// Commit {{NUM}} of {{TOTAL}}

class Activity {
  constructor() {
    this.date = '{{DATE}}';
    this.commitNumber = {{NUM}};
    this.totalCommits = {{TOTAL}};
  }

  describe() {
    return `Contribution on ${this.date} (${this.commitNumber}/${this.totalCommits})`;
  }
}

module.exports = Activity;

if (require.main === module) {
  console.log(new Activity().describe());
}
""",
        structure=("`src/` - JavaScript sources", "`package.json` - package manifest"),
        support_files={
            "package.json": '{\n  "name": "{{REPO}}",\n  "version": "1.0.0",\n  "main": "src/activity.js"\n}\n',
            ".gitignore": NODE_GITIGNORE,
        },
    ),
    Language.TYPESCRIPT: LanguageTemplate(
        language=Language.TYPESCRIPT,
        display_name="TypeScript",
        extension=".ts",
        activity_file="src/activity.ts",
        code="""// Contribution record for {{DATE}}
// Commit {{NUM}} of {{TOTAL}}

export interface ContributionInfo {
  date: string;
  commitNumber: number;
  totalCommits: number;
}

export class Activity implements ContributionInfo {
  readonly date: string = '{{DATE}}';
  readonly commitNumber: number = {{NUM}};
  readonly totalCommits: number = {{TOTAL}};

  describe(): string {
    return `Contribution on ${this.date} (${this.commitNumber}/${this.totalCommits})`;
  }

  isLast(): boolean {
    return this.commitNumber === this.totalCommits;
  }
}

export function summarize(info: ContributionInfo): string {
  const progress = Math.round((info.commitNumber / info.totalCommits) * 100);
  return `${info.date}: ${progress}% of the day's contributions`;
}

const activity = new Activity();
console.log(activity.describe());
console.log(summarize(activity));
""",
        structure=("`src/` - TypeScript sources", "`tsconfig.json` - compiler options"),
        support_files={
            "package.json": '{\n  "name": "{{REPO}}",\n  "version": "1.0.0",\n  "private": true\n}\n',
            "tsconfig.json": '{\n  "compilerOptions": {\n    "target": "ES2020",\n    "strict": true\n  }\n}\n',
            ".gitignore": NODE_GITIGNORE,
        },
    ),
    Language.GO: LanguageTemplate(
        language=Language.GO,
        display_name="Go",
        extension=".go",
        activity_file="activity.go",
        code="""// Contribution record for {{DATE}}
// Commit {{NUM}} of {{TOTAL}}
package main

import (
	"fmt"
	"strings"
)

// Activity describes one synthesized contribution.
type Activity struct {
	Date         string
	CommitNumber int
	TotalCommits int
}

// NewActivity returns the record for this commit.
func NewActivity() Activity {
	return Activity{
		Date:         "{{DATE}}",
		CommitNumber: {{NUM}},
		TotalCommits: {{TOTAL}},
	}
}

// Describe renders a human readable summary.
func (a Activity) Describe() string {
	return fmt.Sprintf("Contribution on %s (%d/%d)", a.Date, a.CommitNumber, a.TotalCommits)
}

func main() {
	activity := NewActivity()
	fmt.Println(strings.TrimSpace(activity.Describe()))
}
""",
        structure=("`activity.go` - activity record", "`go.mod` - module definition"),
        support_files={"go.mod": "module {{REPO}}\n\ngo 1.21\n"},
    ),
    Language.RUST: LanguageTemplate(
        language=Language.RUST,
        display_name="Rust",
        extension=".rs",
        activity_file="src/main.rs",
        code="""// Contribution record for {{DATE}}
// Commit {{NUM}} of {{TOTAL}}

#[derive(Debug, Clone)]
struct Activity {
    date: &'static str,
    commit_number: u32,
    total_commits: u32,
}

impl Activity {
    fn new() -> Self {
        Activity {
            date: "{{DATE}}",
            commit_number: {{NUM}},
            total_commits: {{TOTAL}},
        }
    }

    fn describe(&self) -> String {
        format!(
            "Contribution on {} ({}/{})",
            self.date, self.commit_number, self.total_commits
        )
    }
}

fn main() {
    let activity = Activity::new();
    println!("{}", activity.describe());
}
""",
        structure=("`src/` - Rust sources", "`Cargo.toml` - crate manifest"),
        support_files={
            "Cargo.toml": '[package]\nname = "{{REPO}}"\nversion = "0.1.0"\nedition = "2021"\n',
            ".gitignore": "/target\n",
        },
    ),
    Language.CPP: LanguageTemplate(
        language=Language.CPP,
        display_name="C++",
        extension=".cpp",
        activity_file="src/activity.cpp",
        code="""// Contribution record for {{DATE}}
// Commit {{NUM}} of {{TOTAL}}
#include <iostream>
#include <string>

class Activity {
public:
    Activity() : date_("{{DATE}}"), commitNumber_({{NUM}}), totalCommits_({{TOTAL}}) {}

    std::string describe() const {
        return "Contribution on " + date_ + " (" + std::to_string(commitNumber_) + "/" +
               std::to_string(totalCommits_) + ")";
    }

private:
    std::string date_;
    int commitNumber_;
    int totalCommits_;
};

int main() {
    Activity activity;
    std::cout << activity.describe() << std::endl;
    return 0;
}
""",
        structure=("`src/` - C++ sources", "`CMakeLists.txt` - build definition"),
        support_files={
            "CMakeLists.txt": "cmake_minimum_required(VERSION 3.10)\nproject({{REPO}})\nadd_executable(activity src/activity.cpp)\n",
            ".gitignore": "build/\n",
        },
    ),
    Language.C: LanguageTemplate(
        language=Language.C,
        display_name="C",
        extension=".c",
        activity_file="src/activity.c",
        code="""/* Contribution record for {{DATE}} */
/* Commit {{NUM}} of {{TOTAL}} */
#include <stdio.h>

typedef struct {
    const char *date;
    int commit_number;
    int total_commits;
} Activity;

static void describe(const Activity *activity) {
    printf("Contribution on %s (%d/%d)\\n", activity->date,
           activity->commit_number, activity->total_commits);
}

int main(void) {
    Activity activity = {"{{DATE}}", {{NUM}}, {{TOTAL}}};
    describe(&activity);
    return 0;
}
""",
        structure=("`src/` - C sources", "`Makefile` - build rules"),
        support_files={"Makefile": "activity: src/activity.c\n\tcc -o activity src/activity.c\n"},
    ),
    Language.CSHARP: LanguageTemplate(
        language=Language.CSHARP,
        display_name="C#",
        extension=".cs",
        activity_file="Activity.cs",
        code="""// Contribution record for {{DATE}}
// Commit {{NUM}} of {{TOTAL}}
using System;

namespace Contributions
{
    public class Activity
    {
        public string Date { get; } = "{{DATE}}";
        public int CommitNumber { get; } = {{NUM}};
        public int TotalCommits { get; } = {{TOTAL}};

        public string Describe()
        {
            return $"Contribution on {Date} ({CommitNumber}/{TotalCommits})";
        }

        public static void Main(string[] args)
        {
            Console.WriteLine(new Activity().Describe());
        }
    }
}
""",
        structure=("`Activity.cs` - activity record", "`Contributions.csproj` - project file"),
        support_files={
            "Contributions.csproj": '<Project Sdk="Microsoft.NET.Sdk">\n  <PropertyGroup>\n    <OutputType>Exe</OutputType>\n    <AssemblyName>{{REPO}}</AssemblyName>\n  </PropertyGroup>\n</Project>\n',
            ".gitignore": "bin/\nobj/\n",
        },
    ),
    Language.PHP: LanguageTemplate(
        language=Language.PHP,
        display_name="PHP",
        extension=".php",
        activity_file="src/Activity.php",
        code="""<?php
// Contribution record for {{DATE}}
// Commit {{NUM}} of {{TOTAL}}

class Activity
{
    private string $date = '{{DATE}}';
    private int $commitNumber = {{NUM}};
    private int $totalCommits = {{TOTAL}};

    public function describe(): string
    {
        return sprintf('Contribution on %s (%d/%d)', $this->date, $this->commitNumber, $this->totalCommits);
    }
}

echo (new Activity())->describe() . PHP_EOL;
""",
        structure=("`src/` - PHP sources", "`composer.json` - package manifest"),
        support_files={"composer.json": '{\n  "name": "commit-canvas/{{REPO}}",\n  "type": "project"\n}\n'},
    ),
    Language.RUBY: LanguageTemplate(
        language=Language.RUBY,
        display_name="Ruby",
        extension=".rb",
        activity_file="lib/activity.rb",
        code="""# Contribution record for {{DATE}}
# Commit {{NUM}} of {{TOTAL}}

class Activity
  attr_reader :date, :commit_number, :total_commits

  def initialize
    @date = '{{DATE}}'
    @commit_number = {{NUM}}
    @total_commits = {{TOTAL}}
  end

  def describe
    "Contribution on #{date} (#{commit_number}/#{total_commits})"
  end

  def last?
    commit_number == total_commits
  end
end

puts Activity.new.describe if __FILE__ == $PROGRAM_NAME
""",
        structure=("`lib/` - Ruby sources", "`Gemfile` - dependencies"),
        support_files={"Gemfile": "source 'https://rubygems.org'\n"},
    ),
    Language.SWIFT: LanguageTemplate(
        language=Language.SWIFT,
        display_name="Swift",
        extension=".swift",
        activity_file="Sources/Activity.swift",
        code="""//
//  {{CLASS}}.swift
//
//  Created for contribution on {{DATE}}
//  Commit {{NUM}} of {{TOTAL}}
//

import Foundation

struct {{CLASS}} {
    let date = "{{DATE}}"
    let commitNumber = {{NUM}}
    let totalCommits = {{TOTAL}}

    var info: String {
        return "Contribution on \\(date) (\\(commitNumber)/\\(totalCommits))"
    }
}

// Usage
#if DEBUG
let contribution = {{CLASS}}()
print(contribution.info)
#endif
""",
        structure=("`Sources/` - Swift source files", "`Package.swift` - Swift package manifest"),
        support_files={
            "Package.swift": """// swift-tools-version:5.5
import PackageDescription

let package = Package(
    name: "{{REPO}}",
    products: [
        .library(name: "{{REPO}}", targets: ["{{REPO}}"]),
    ],
    dependencies: [],
    targets: [
        .target(name: "{{REPO}}", dependencies: [], path: "Sources"),
    ]
)
""",
            ".gitignore": ".DS_Store\n/.build\n/Packages\n/*.xcodeproj\n/*.xcworkspace\n",
        },
    ),
    Language.KOTLIN: LanguageTemplate(
        language=Language.KOTLIN,
        display_name="Kotlin",
        extension=".kt",
        activity_file="src/main/kotlin/Activity.kt",
        code="""// Contribution record for {{DATE}}
// Commit {{NUM}} of {{TOTAL}}

data class Activity(
    val date: String = "{{DATE}}",
    val commitNumber: Int = {{NUM}},
    val totalCommits: Int = {{TOTAL}},
) {
    fun describe(): String = "Contribution on $date ($commitNumber/$totalCommits)"

    fun isLast(): Boolean = commitNumber == totalCommits
}

fun main() {
    val activity = Activity()
    println(activity.describe())
}
""",
        structure=("`src/main/kotlin/` - Kotlin sources", "`build.gradle.kts` - Gradle build"),
        support_files={
            "build.gradle.kts": 'plugins {\n    kotlin("jvm") version "1.9.0"\n}\n',
            "settings.gradle.kts": 'rootProject.name = "{{REPO}}"\n',
        },
    ),
    Language.SHELL: LanguageTemplate(
        language=Language.SHELL,
        display_name="Shell",
        extension=".sh",
        activity_file="activity.sh",
        code="""#!/usr/bin/env bash
# Contribution record for {{DATE}}
# Commit {{NUM}} of {{TOTAL}}
set -euo pipefail

DATE="{{DATE}}"
COMMIT_NUMBER={{NUM}}
TOTAL_COMMITS={{TOTAL}}

describe() {
  echo "Contribution on ${DATE} (${COMMIT_NUMBER}/${TOTAL_COMMITS})"
}

describe
""",
    ),
    Language.VUE: LanguageTemplate(
        language=Language.VUE,
        display_name="Vue",
        extension=".vue",
        activity_file="src/components/Activity.vue",
        code="""<template>
  <div class="contribution">
    <h3>Contribution Record</h3>
    <p>Date: {{ date }}</p>
    <p>Commit: {{ commitNumber }} / {{ totalCommits }}</p>
  </div>
</template>

<script>
export default {
  name: 'ContributionRecord',
  data() {
    return {
      date: '{{DATE}}',
      commitNumber: {{NUM}},
      totalCommits: {{TOTAL}}
    }
  }
}
</script>

<style scoped>
.contribution {
  border: 1px solid #ddd;
  padding: 1rem;
  margin: 1rem;
  border-radius: 4px;
}
</style>
""",
        structure=("`src/components/` - Vue components", "`package.json` - Dependencies"),
        support_files={
            "package.json": """{
  "name": "{{REPO}}",
  "version": "1.0.0",
  "private": true,
  "scripts": {
    "serve": "vue-cli-service serve",
    "build": "vue-cli-service build"
  },
  "dependencies": {
    "vue": "^3.0.0"
  }
}
""",
            ".gitignore": NODE_GITIGNORE,
        },
    ),
    Language.HTML: LanguageTemplate(
        language=Language.HTML,
        display_name="HTML",
        extension=".html",
        activity_file="index.html",
        code="""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Contribution {{DATE}}</title>
</head>
<body>
  <main class="contribution">
    <h1>Contribution Record</h1>
    <section>
      <p>Date: <time datetime="{{DATE}}">{{DATE}}</time></p>
      <p>Commit <strong>{{NUM}}</strong> of <strong>{{TOTAL}}</strong></p>
    </section>
    <footer>
      <p>Generated contribution page.</p>
    </footer>
  </main>
</body>
</html>
""",
    ),
    Language.CSS: LanguageTemplate(
        language=Language.CSS,
        display_name="CSS",
        extension=".css",
        activity_file="styles/activity.css",
        code="""/* Contribution record for {{DATE}} */
/* Commit {{NUM}} of {{TOTAL}} */

.contribution-{{NUM}} {
  display: flex;
  flex-direction: column;
  padding: 1rem;
  margin: 0.5rem 0;
  border: 1px solid #d0d7de;
  border-radius: 6px;
  background-color: #f6f8fa;
}

.contribution-{{NUM}}::before {
  content: "{{DATE}} ({{NUM}}/{{TOTAL}})";
  font-weight: 600;
  color: #216e39;
}
""",
    ),
    Language.SCSS: LanguageTemplate(
        language=Language.SCSS,
        display_name="SCSS",
        extension=".scss",
        activity_file="styles/activity.scss",
        code="""// Contribution record for {{DATE}}
// Commit {{NUM}} of {{TOTAL}}

$accent: #216e39;
$border: #d0d7de;

.contribution {
  padding: 1rem;
  border: 1px solid $border;
  border-radius: 6px;

  &__title {
    font-weight: 600;
    color: $accent;

    &::after {
      content: " {{DATE}} ({{NUM}}/{{TOTAL}})";
    }
  }

  &:hover {
    border-color: darken($border, 10%);
  }
}
""",
    ),
    Language.SQL: LanguageTemplate(
        language=Language.SQL,
        display_name="SQL",
        extension=".sql",
        activity_file="sql/activity.sql",
        code="""-- Contribution record for {{DATE}}
-- Commit {{NUM}} of {{TOTAL}}

CREATE TABLE IF NOT EXISTS contributions (
    id INTEGER PRIMARY KEY,
    contribution_date DATE NOT NULL,
    commit_number INTEGER NOT NULL,
    total_commits INTEGER NOT NULL
);

INSERT INTO contributions (contribution_date, commit_number, total_commits)
VALUES ('{{DATE}}', {{NUM}}, {{TOTAL}});
""",
    ),
}


def is_supported(language: str) -> bool:
    """Return ``True`` when ``language`` names a registered template."""
    try:
        Language(language.strip().lower())
    except ValueError:
        return False
    return True


def get_template(language: str | Language) -> LanguageTemplate:
    """Resolve the template for ``language``; raises ``KeyError`` when unknown."""
    key = language if isinstance(language, Language) else Language(language.strip().lower())
    return TEMPLATES[key]


def supported_languages() -> list[tuple[str, str]]:
    """Return ``(identifier, display name)`` pairs in registry order."""
    return [(lang.value, TEMPLATES[lang].display_name) for lang in Language]


def activity_file_path(language: str | Language) -> str:
    """Repository-relative path that a language's commits rewrite."""
    return get_template(language).activity_file


def build_readme(repo_name: str, weights: Sequence[LanguageWeight]) -> str:
    """Build the repository README for the configured language mix."""
    if len(weights) == 1:
        return get_template(weights[0].language).readme(repo_name)

    lines = [
        f"# {repo_name}",
        "",
        f"Generated with {PROJECT_LINK}.",
        "",
        "## Languages",
        "",
        "This repository contains contributions in multiple programming languages:",
        "",
    ]
    for weight in weights:
        lines.append(f"- **{get_template(weight.language).display_name}** ({weight.ratio}%)")
    lines.extend(
        [
            "",
            "## About",
            "",
            "Each commit uses one language chosen by the configured ratios.",
            "",
            "## License",
            "",
            "MIT License",
            "",
        ]
    )
    return "\n".join(lines)


def merge_additional_files(repo_name: str, weights: Sequence[LanguageWeight]) -> dict[str, str]:
    """Union the support files of every configured language.

    Identical duplicates are kept once. When two languages ship different
    content for the same path, the later language's copy is stored under
    ``<path>.<language>``.
    """
    merged: dict[str, str] = {}
    owners: dict[str, str] = {}
    for weight in weights:
        template = get_template(weight.language)
        for path, content in template.additional_files(repo_name).items():
            existing = merged.get(path)
            if existing is None:
                merged[path] = content
                owners[path] = template.language.value
                continue
            if existing == content:
                continue
            renamed = f"{path}.{template.language.value}"
            merged[renamed] = content
            owners[renamed] = template.language.value
            logger.info(
                "support file conflict: %s owned by %s, storing %s copy as %s",
                path,
                owners[path],
                template.language.value,
                renamed,
            )
    return merged
