# ============================================================================
# barbershop/services/cash/cash_service.py
# ============================================================================
"""Cash drawer sessions, day totals and manual movements"""
import logging
from collections import defaultdict
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from barbershop.core.exceptions import CashSessionClosedError, NotFoundError, ValidationError
from barbershop.models.appointment import Appointment, STATUS_FINALIZED, sale_row_clause
from barbershop.models.barbershop import Barbershop
from barbershop.models.cash import CashSession, CashTransaction
from barbershop.schemas.cash import CashStatus, DayStats
from barbershop.services.availability.availability_service import shop_now
from barbershop.services.pricing.payment_ledger import ZERO, money, parse_payment_label, to_decimal

logger = logging.getLogger(__name__)

HISTORY_SIZE = 5


class CashService:
    """Handles cash flow operations"""

    @staticmethod
    def get_open_session(db: Session, barbershop_id: UUID) -> Optional[CashSession]:
        return db.query(CashSession).filter(
            CashSession.barbershop_id == barbershop_id,
            CashSession.status == "open",
        ).first()

    @staticmethod
    def require_open_session(db: Session, barbershop_id: UUID) -> CashSession:
        session = CashService.get_open_session(db, barbershop_id)
        if not session:
            raise CashSessionClosedError("CAIXA FECHADO! Abra o movimento para lançar.")
        return session

    @staticmethod
    def history(db: Session, barbershop_id: UUID, limit: int = HISTORY_SIZE) -> List[CashSession]:
        return db.query(CashSession).filter(
            CashSession.barbershop_id == barbershop_id,
            CashSession.status == "closed",
        ).order_by(CashSession.closed_at.desc()).limit(limit).all()

    @staticmethod
    def suggested_initial_value(db: Session, barbershop_id: UUID) -> Optional[Decimal]:
        """Last counted value, carried over as the next opening float"""
        last = CashService.history(db, barbershop_id, limit=1)
        if last and last[0].final_value is not None:
            return to_decimal(last[0].final_value)
        return None

    @staticmethod
    def open_session(db: Session, barbershop: Barbershop, initial_value=None) -> CashSession:
        if CashService.get_open_session(db, barbershop.id):
            raise ValidationError("Já existe um caixa aberto")

        if initial_value is None:
            initial_value = CashService.suggested_initial_value(db, barbershop.id)
        if initial_value is None:
            raise ValidationError("Informe o valor inicial do caixa")

        now = shop_now(barbershop.timezone)
        session = CashSession(
            barbershop_id=barbershop.id,
            initial_value=money(initial_value),
            status="open",
            session_date=now.date(),
            opened_at=now,
        )
        db.add(session)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ValidationError("Já existe um caixa aberto")
        db.refresh(session)
        logger.info(f"Opened cash session {session.id} with {session.initial_value}")
        return session

    # ========================================================================
    # Totals
    # ========================================================================

    @staticmethod
    def day_stats(db: Session, barbershop_id: UUID, day: date) -> DayStats:
        """Finalized sales of the day split by payment token"""
        rows = db.query(Appointment).filter(
            Appointment.barbershop_id == barbershop_id,
            Appointment.status == STATUS_FINALIZED,
            Appointment.date == day,
            sale_row_clause(),
        ).all()

        # Rows of one sale share the payment label; parse it once per sale
        sales: Dict[str, list] = defaultdict(list)
        for row in rows:
            sales[row.venda_id or f"row-{row.id}"].append(row)

        totals = defaultdict(lambda: ZERO)
        grand_total = ZERO
        for sale_rows in sales.values():
            sale_total = sum((to_decimal(r.price) for r in sale_rows), ZERO)
            grand_total += sale_total
            for method, amount in parse_payment_label(sale_rows[0].payment_method, sale_total).items():
                totals[method] += amount

        stats = DayStats(
            date=day,
            total=grand_total,
            dinheiro=totals["dinheiro"],
            pix=totals["pix"],
            cartao=totals["credito"] + totals["debito"],
            pacote=totals["pacote"],
            sales_count=len(sales),
        )
        return stats

    @staticmethod
    def _manual_movements(db: Session, session: CashSession):
        cash_in = ZERO
        cash_out = ZERO
        transactions = db.query(CashTransaction).filter(
            CashTransaction.cash_flow_id == session.id,
            CashTransaction.venda_id.is_(None),
        ).all()
        for tx in transactions:
            if tx.type == "entrada":
                cash_in += to_decimal(tx.amount)
            else:
                cash_out += to_decimal(tx.amount)
        return cash_in, cash_out

    @staticmethod
    def expected_value(db: Session, session: CashSession) -> Decimal:
        """initial + cash sales + manual cash in - withdrawals"""
        stats = CashService.day_stats(db, session.barbershop_id, session.session_date)
        cash_in, cash_out = CashService._manual_movements(db, session)
        return to_decimal(session.initial_value) + stats.dinheiro + cash_in - cash_out

    @staticmethod
    def current_status(db: Session, barbershop: Barbershop) -> CashStatus:
        session = CashService.get_open_session(db, barbershop.id)
        suggested = CashService.suggested_initial_value(db, barbershop.id) or ZERO
        if not session:
            return CashStatus(suggested_initial_value=suggested)

        stats = CashService.day_stats(db, barbershop.id, session.session_date)
        cash_in, cash_out = CashService._manual_movements(db, session)
        stats.cash_in = cash_in
        stats.cash_out = cash_out
        return CashStatus(
            session=session.to_dict(),
            stats=stats,
            expected_value=to_decimal(session.initial_value) + stats.dinheiro + cash_in - cash_out,
            suggested_initial_value=suggested,
        )

    @staticmethod
    def close_session(db: Session, barbershop: Barbershop, final_value) -> CashSession:
        session = CashService.require_open_session(db, barbershop.id)
        expected = CashService.expected_value(db, session)
        counted = money(final_value)

        session.expected_value = money(expected)
        session.final_value = counted
        session.difference = counted - money(expected)
        session.status = "closed"
        session.closed_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(session)

        logger.info(
            f"Closed cash session {session.id}: expected {session.expected_value}, "
            f"counted {session.final_value}, difference {session.difference}"
        )
        return session

    # ========================================================================
    # Movements
    # ========================================================================

    @staticmethod
    def record_movement(
            db: Session,
            barbershop_id: UUID,
            type: str,
            amount,
            description: Optional[str] = None,
            payment_method: Optional[str] = "dinheiro",
            venda_id: Optional[str] = None,
    ) -> CashTransaction:
        if type not in ("entrada", "saida"):
            raise ValidationError(f"Unknown movement type: {type}")
        if to_decimal(amount) <= 0:
            raise ValidationError("Amount must be greater than zero")

        session = CashService.require_open_session(db, barbershop_id)
        transaction = CashTransaction(
            cash_flow_id=session.id,
            barbershop_id=barbershop_id,
            type=type,
            amount=money(amount),
            payment_method=payment_method,
            description=description,
            venda_id=venda_id,
        )
        db.add(transaction)
        db.commit()
        db.refresh(transaction)
        logger.info(f"Recorded cash {type} of {transaction.amount} on session {session.id}")
        return transaction

    @staticmethod
    def delete_movement(db: Session, barbershop_id: UUID, transaction_id: UUID):
        transaction = db.query(CashTransaction).filter(
            CashTransaction.id == transaction_id,
            CashTransaction.barbershop_id == barbershop_id,
        ).first()
        if not transaction:
            raise NotFoundError("Cash transaction not found")
        db.delete(transaction)
        db.commit()
