import re
import math
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple
from models.resume_models import AnalysisResult
import logging

logger = logging.getLogger(__name__)

DEFAULT_SKILLS: Tuple[str, ...] = (
    # Programming / web
    "javascript", "typescript", "node", "express", "react",
    "html", "css", "rest", "api", "git",
    # Data / cloud
    "sql", "python", "java", "aws", "azure", "docker", "kubernetes",
    # Process
    "agile", "scrum", "jira", "testing", "unit testing", "ci/cd",
)

SKILL_POINTS = 60
LONG_TEXT_CHARS = 1200
DETAILED_TEXT_CHARS = 2500
SHORT_TEXT_CHARS = 900
MAX_LISTED_MISSING = 8


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class ATSScorer:
    def __init__(self, default_skills: Sequence[str] = DEFAULT_SKILLS):
        self.default_skills = tuple(default_skills)

        # Label synonyms per section; order matches the structure weights below
        self.section_patterns: Dict[str, Tuple[str, ...]] = {
            'summary': ('summary', 'professional summary', 'profile'),
            'experience': ('experience', 'work experience', 'employment'),
            'education': ('education', 'academics'),
            'skills': ('skills', 'technical skills', 'core skills'),
            'projects': ('projects', 'project experience'),
        }

        self.section_points: Dict[str, int] = {
            'summary': 5,
            'experience': 10,
            'education': 5,
            'skills': 5,
            'projects': 5,
        }

        self.format_indicators = {
            'bullet_points': re.compile(r'^[^\S\n]*[-•*]\s+\S', re.MULTILINE),
            'quantified': re.compile(r'\b\d{4}\b|\b\d+%|\b\d+\+', re.ASCII),
        }

    def analyze_resume(self, text: str, target_skills: Optional[Iterable[str]] = None) -> AnalysisResult:
        """
        Score resume text against a skill catalog.

        ``target_skills=None`` selects the built-in catalog; any other iterable,
        including an empty one, is used as given.
        """
        normalized = self.normalize(text)
        catalog = self.default_skills if target_skills is None else tuple(target_skills)

        skills_found, missing_skills = self.match_skills(normalized, catalog)
        sections = self.detect_sections(normalized)

        overall_score = self.calculate_overall_score(
            normalized, skills_found, missing_skills, sections
        )
        suggestions = self.generate_suggestions(normalized, missing_skills, sections)

        logger.debug(
            f"Scored {len(normalized)} chars: score={overall_score}, "
            f"skills={len(skills_found)}/{len(skills_found) + len(missing_skills)}, "
            f"sections={sorted(sections)}"
        )

        return AnalysisResult(
            ats_score=overall_score,
            skills_found=skills_found,
            missing_skills=missing_skills,
            suggestions=suggestions,
        )

    @staticmethod
    def normalize(text: str) -> str:
        text = str(text or "").replace("\r\n", "\n").replace("\r", "\n")
        text = re.sub(r'[^\S\n]+', ' ', text)
        return text.lower()

    @staticmethod
    def includes_word(text: str, word: str) -> bool:
        """Match ``word`` only when flanked by non-alphanumerics or the text edges."""
        if not word:
            return False
        pattern = r'(^|[^a-z0-9])' + re.escape(word) + r'([^a-z0-9]|$)'
        return re.search(pattern, text, re.IGNORECASE) is not None

    def match_skills(self, normalized: str, catalog: Sequence[str]) -> Tuple[List[str], List[str]]:
        found = set()
        missing = set()

        for raw_skill in catalog:
            label = str(raw_skill).strip()
            if not label:
                continue
            bucket = found if self.includes_word(normalized, label.lower()) else missing
            bucket.add(label)

        return sorted(found), sorted(missing)

    def detect_sections(self, normalized: str) -> FrozenSet[str]:
        return frozenset(
            section
            for section, labels in self.section_patterns.items()
            if any(self.includes_word(normalized, label) for label in labels)
        )

    def has_bullets(self, normalized: str) -> bool:
        return self.format_indicators['bullet_points'].search(normalized) is not None

    def has_quantified_results(self, normalized: str) -> bool:
        return self.format_indicators['quantified'].search(normalized) is not None

    def score_skill_coverage(self, skills_found: List[str], missing_skills: List[str]) -> int:
        total = len(skills_found) + len(missing_skills)
        if total == 0:
            return 0
        return _round_half_up(len(skills_found) / total * SKILL_POINTS)

    def score_structure(self, sections: FrozenSet[str]) -> int:
        return sum(points for section, points in self.section_points.items() if section in sections)

    def score_format(self, normalized: str) -> int:
        score = 0
        if len(normalized) >= LONG_TEXT_CHARS:
            score += 5
        if len(normalized) >= DETAILED_TEXT_CHARS:
            score += 3
        if self.has_bullets(normalized):
            score += 4
        if self.has_quantified_results(normalized):
            score += 3
        return score

    def calculate_overall_score(self, normalized: str, skills_found: List[str],
                                missing_skills: List[str], sections: FrozenSet[str]) -> int:
        """Skill coverage (max 60) + structure (max 25) + formatting (max 15), clamped to 0..100."""
        overall = self.score_skill_coverage(skills_found, missing_skills)
        overall += self.score_structure(sections)
        overall += self.score_format(normalized)
        return max(0, min(100, overall))

    def generate_suggestions(self, normalized: str, missing_skills: List[str],
                             sections: FrozenSet[str]) -> List[str]:
        suggestions = []

        if 'skills' not in sections:
            suggestions.append("Add a dedicated 'Skills' section with relevant keywords.")
        if 'experience' not in sections:
            suggestions.append("Add a 'Work Experience' section with role details and impact.")
        if not self.has_bullets(normalized):
            suggestions.append("Use bullet points for responsibilities and achievements.")
        if not self.has_quantified_results(normalized):
            suggestions.append("Add measurable results (%, numbers) and dates to strengthen impact.")
        if missing_skills:
            listed = ", ".join(missing_skills[:MAX_LISTED_MISSING])
            if len(missing_skills) > MAX_LISTED_MISSING:
                listed += ", ..."
            suggestions.append(f"If relevant, include missing keywords naturally: {listed}")
        if len(normalized) < SHORT_TEXT_CHARS:
            suggestions.append(
                "Add more detail (projects, tools, accomplishments); the resume looks too short."
            )

        return suggestions


_default_scorer = ATSScorer()


def analyze_resume(text: str, target_skills: Optional[Iterable[str]] = None) -> AnalysisResult:
    return _default_scorer.analyze_resume(text, target_skills)
