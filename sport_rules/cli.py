"""
sport-rules CLI

사용법:
    sport-rules sports
    sport-rules rank data/meet.json --coefficient wilks --top 10
    sport-rules rank data/meet.json --output data/rankings.json
    sport-rules coefficients 600 82.5 --gender M --equipment raw
    sport-rules suggest data/meet.json a1 squat
"""
import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from loguru import logger

from . import coefficients
from .config import RulesSettings, get_settings
from .errors import SportRulesError, UnsupportedDisciplineError
from .loader import CompetitionData, load_competition_file
from .plugins.base import coerce_category_rules
from .registry import get_registry
from .schemas import RankingResult

# 순위표 보조 점수 (있는 첫 항목)
SECONDARY_SCORE_KEYS = ("coefficient_score", "sinclair", "wilks")


def setup_logging(settings: RulesSettings) -> None:
    """콘솔 + (설정 시) 일별 로테이션 파일 로그"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=settings.log_level.upper(),
    )
    if settings.log_dir:
        logger.add(
            str(Path(settings.log_dir) / "sport_rules_{time:YYYY-MM-DD}.log"),
            rotation="1 day",
            retention="30 days",
            level="DEBUG",
        )


# =====================================================
# 출력
# =====================================================

def print_ranking_summary(
    competition: CompetitionData,
    rankings: List[RankingResult],
    title: str = "",
    top_n: int = 20
):
    """랭킹 요약 출력"""
    names = {a.id: a for a in competition.athletes}

    print(f"\n{'='*60}")
    print(f" {title}")
    print(f"{'='*60}")
    print(f"{'순위':>4} {'이름':<12} {'소속':<15} {'합계':>10} {'계수':>10}")
    print(f"{'-'*60}")

    for r in rankings[:top_n]:
        athlete = names.get(r.athlete_id)
        name = athlete.name if athlete else r.athlete_id
        team = athlete.team if athlete and athlete.team else "-"
        if len(team) > 12:
            team = team[:12] + ".."
        secondary = next((r.breakdown[k] for k in SECONDARY_SCORE_KEYS if k in r.breakdown), None)
        secondary_text = f"{secondary:>10.2f}" if secondary is not None else f"{'-':>10}"
        print(f"{r.rank:>4} {name:<12} {team:<15} {r.total_score:>10.1f} {secondary_text}")


def export_rankings(
    competition: CompetitionData,
    rankings: List[RankingResult],
    output_file: str,
    category_rules: Optional[Dict] = None
):
    """랭킹 결과를 JSON으로 내보내기"""
    names = {a.id: a.name for a in competition.athletes}
    export_data = {
        "meta": {
            "generated_at": datetime.now().isoformat(),
            "sport": competition.sport,
            "competition": competition.name,
            "category_rules": category_rules,
            "total_athletes": len(rankings),
        },
        "rankings": [
            {
                "rank": r.rank,
                "athlete_id": r.athlete_id,
                "name": names.get(r.athlete_id, r.athlete_id),
                "total_score": r.total_score,
                "breakdown": r.breakdown,
            }
            for r in rankings
        ],
    }

    output = Path(output_file)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w", encoding="utf-8") as f:
        json.dump(export_data, f, ensure_ascii=False, indent=2)

    logger.info(f"랭킹 내보내기 완료: {output_file}")


# =====================================================
# 명령
# =====================================================

def cmd_sports(args) -> int:
    registry = get_registry()
    for sport, meta in registry.get_all_plugins_metadata().items():
        print(f"{sport:<15} {meta['display_name']:<15} {', '.join(meta['supported_disciplines'])}")
    return 0


def cmd_rank(args) -> int:
    competition = load_competition_file(args.data)
    plugin = competition.plugin

    rules_data = competition.category_rules.model_dump() if competition.category_rules else {}
    if args.coefficient:
        rules_data["coefficient"] = args.coefficient
    if args.rank_by:
        rules_data["rank_by"] = args.rank_by
    rules = coerce_category_rules(rules_data)

    rankings = plugin.calculate_ranking(competition.athletes, competition.attempts, rules)

    if args.output:
        export_rankings(competition, rankings, args.output, rules.model_dump())
        return 0

    top_n = args.top if args.top is not None else get_settings().ranking_top_n
    title = f"{plugin.display_name} {competition.name}".strip() + f" 랭킹 ({rules.coefficient})"
    print_ranking_summary(competition, rankings, title=title, top_n=top_n)
    return 0


def cmd_coefficients(args) -> int:
    scores = coefficients.calculate_all(args.total, args.bodyweight, args.gender, args.equipment)
    print(f"합계 {args.total:g}kg / 체중 {args.bodyweight:g}kg ({args.gender}, {args.equipment})")
    for name, value in scores.items():
        print(f"  {name:<10} {value:>10.2f}")
    return 0


def cmd_suggest(args) -> int:
    competition = load_competition_file(args.data)
    if competition.get_athlete(args.athlete) is None:
        logger.error(f"Unknown athlete: {args.athlete}")
        return 1
    if not competition.plugin.supports(args.discipline):
        raise UnsupportedDisciplineError(competition.sport, args.discipline)

    suggestion = competition.plugin.propose_next_attempt(
        args.athlete,
        args.discipline,
        competition.attempts,
        competition.context_for(args.athlete),
    )
    print(f"{args.athlete} {args.discipline}: {suggestion.suggested_weight:g}kg")
    print(f"  {suggestion.reasoning} (confidence {suggestion.confidence:.0%})")
    return 0


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sport-rules", description="근력 종목 경기 룰 엔진")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sports = subparsers.add_parser("sports", help="지원 종목과 세부 종목 목록")
    sports.set_defaults(func=cmd_sports)

    rank = subparsers.add_parser("rank", help="대회 데이터 순위 계산")
    rank.add_argument("data", type=str, help="대회 JSON 파일")
    rank.add_argument("--output", type=str, help="출력 파일 (JSON)")
    rank.add_argument("--coefficient", choices=coefficients.COEFFICIENT_NAMES, help="적용 계수")
    rank.add_argument("--rank-by", choices=("total", "coefficient"), help="정렬 기준")
    rank.add_argument("--top", type=positive_int, help="출력할 상위 N명")
    rank.set_defaults(func=cmd_rank)

    coef = subparsers.add_parser("coefficients", help="합계/체중으로 계수 계산")
    coef.add_argument("total", type=float, help="합계 (kg)")
    coef.add_argument("bodyweight", type=float, help="체중 (kg)")
    coef.add_argument("--gender", choices=("M", "F"), required=True, help="성별")
    coef.add_argument("--equipment", choices=("raw", "equipped"), default="raw", help="장비 구분")
    coef.set_defaults(func=cmd_coefficients)

    suggest = subparsers.add_parser("suggest", help="다음 시기 중량 제안")
    suggest.add_argument("data", type=str, help="대회 JSON 파일")
    suggest.add_argument("athlete", type=str, help="선수 ID")
    suggest.add_argument("discipline", type=str, help="세부 종목")
    suggest.set_defaults(func=cmd_suggest)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(get_settings())

    try:
        return args.func(args)
    except SportRulesError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"파일 오류: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
