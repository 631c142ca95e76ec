#!/usr/bin/env python3
"""
Seed a demo classroom.

Creates a teacher and a roster of students, then simulates each student's
trading with a seeded random sequence of buys and sells so leaderboards and
badges have something to show. Re-running with the same seed against an
empty database produces the same classroom.
"""

import argparse
import random
from decimal import Decimal
from typing import Optional

from papertrade.app_context import AppContext
from papertrade.config.logging_config import setup_logging
from papertrade.core.exceptions import InsufficientFundsError, InsufficientSharesError
from papertrade.domain.models import Actor, Role, TradeOrder

STUDENT_NAMES = ["arnold", "carlos", "dorothy_ann", "keesha", "phoebe", "ralphie", "tim", "wanda"]

# Symbols with approximate prices; fills vary around these
STOCKS = [
    ("AAPL", 180.0),
    ("MSFT", 420.0),
    ("GOOGL", 160.0),
    ("AMZN", 150.0),
    ("TSLA", 250.0),
    ("NVDA", 500.0),
    ("XOM", 110.0),
    ("JNJ", 155.0),
]


def seed_classroom(
    ctx: AppContext,
    teacher_name: str = "ms_frizzle",
    students: int = 5,
    trades_per_student: int = 10,
    seed: Optional[int] = 42,
) -> dict:
    """
    Build one class and trade for every student.

    Returns a summary with the teacher id, student ids and the number of
    trades executed.
    """
    rng = random.Random(seed)
    teacher = ctx.register_teacher(teacher_name)
    teacher_actor = Actor(teacher.account_id, Role.TEACHER)
    print(f"✓ Teacher '{teacher.username}' created")

    student_ids = []
    executed = 0
    for name in STUDENT_NAMES[:students]:
        student = ctx.add_student(teacher_actor, name)
        student_ids.append(student.account_id)
        held: dict[str, Decimal] = {}

        for _ in range(trades_per_student):
            if held and rng.random() < 0.3:
                symbol = rng.choice(sorted(held))
                base_price = dict(STOCKS)[symbol]
                price = Decimal(str(round(base_price * rng.uniform(0.9, 1.25), 2)))
                quantity = max(Decimal("1"), (held[symbol] / 2).to_integral_value())
                order = TradeOrder("sell", symbol, quantity, price)
            else:
                symbol, base_price = rng.choice(STOCKS)
                price = Decimal(str(round(base_price * rng.uniform(0.95, 1.05), 2)))
                quantity = Decimal(rng.randint(1, 20))
                order = TradeOrder("buy", symbol, quantity, price)

            try:
                result = ctx.execute_trade(student.account_id, order)
            except (InsufficientFundsError, InsufficientSharesError) as e:
                print(f"  skipped {order.order_type} {order.quantity} {order.symbol}: {e.message}")
                continue

            executed += 1
            holding = result.account.get_holding(symbol)
            if holding is None:
                held.pop(symbol, None)
            else:
                held[symbol] = holding.shares

        badges = ctx.evaluate_achievements(student.account_id).achievements
        print(f"✓ Student '{name}': {', '.join(b.value for b in badges) or 'no badges'}")

    return {"teacher_id": teacher.account_id, "student_ids": student_ids, "trades": executed}


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--teacher", default="ms_frizzle")
    parser.add_argument("--students", type=int, default=5)
    parser.add_argument("--trades", type=int, default=10)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()
    setup_logging()

    with AppContext() as ctx:
        summary = seed_classroom(
            ctx,
            teacher_name=args.teacher,
            students=args.students,
            trades_per_student=args.trades,
            seed=args.seed,
        )
        print("=" * 60)
        print(f"Seeded {len(summary['student_ids'])} students with {summary['trades']} trades")
        for entry in ctx.get_leaderboard(Actor(summary["teacher_id"], Role.TEACHER), "class"):
            print(f"  #{entry.rank:<3} {entry.account.username:<14} {entry.total_value:>14,.2f}")


if __name__ == "__main__":
    main()
