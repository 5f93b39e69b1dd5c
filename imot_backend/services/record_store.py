"""
Persistencia de propiedades, documentos y evaluaciones
"""
from datetime import datetime
import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from imot_backend.config.db_connection import init_db
from imot_backend.exceptions import EntityNotFoundError, ValidationError
from imot_backend.models import (
    Document,
    DocumentData,
    DocumentDataBase,
    Evaluation,
    EvaluationStatus,
    Property,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20


class EvaluationRecordStore:
    """Acceso a la base de datos para el flujo de evaluación"""

    def __init__(self, engine):
        self.engine = engine

    def init_schema(self) -> None:
        init_db(self.engine)

    # Propiedades

    def create_property(self, prop: Property) -> Property:
        with Session(self.engine) as session:
            session.add(prop)
            session.commit()
            session.refresh(prop)
            logger.info(f"Property {prop.id} created: {prop.address}")
            return prop

    def get_property(self, property_id: int) -> Optional[Property]:
        with Session(self.engine) as session:
            return session.get(Property, property_id)

    def list_properties(self, limit: int = 100, offset: int = 0) -> List[Property]:
        with Session(self.engine) as session:
            statement = (
                select(Property)
                .order_by(Property.created_at.desc(), Property.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return list(session.exec(statement).all())

    def _require_property(self, session: Session, property_id: int) -> Property:
        prop = session.get(Property, property_id)
        if prop is None:
            raise EntityNotFoundError(f"Property {property_id} not found")
        return prop

    # Documentos

    def create_document(
        self,
        document: Document,
        data: Optional[Dict[str, Any]] = None
    ) -> Tuple[Document, Optional[DocumentData]]:
        """
        Guardar un documento y sus datos extraídos en una sola transacción:
        se guardan ambos o ninguno
        """
        with Session(self.engine) as session:
            self._require_property(session, document.property_id)

            document_data = None
            try:
                session.add(document)
                session.flush()

                if data is not None:
                    validated = DocumentDataBase.model_validate(data)
                    document_data = DocumentData(
                        **validated.model_dump(),
                        document_id=document.id
                    )
                    session.add(document_data)

                session.commit()
            except PydanticValidationError as e:
                session.rollback()
                logger.warning(f"Invalid extracted data for property {document.property_id}: {e}")
                raise ValidationError("Invalid extracted data", details=e.errors(include_url=False)) from e
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Error saving document for property {document.property_id}: {e}")
                raise

            session.refresh(document)
            if document_data is not None:
                session.refresh(document_data)
            logger.info(f"Document {document.id} ({document.type}) saved for property {document.property_id}")
            return document, document_data

    def get_document(self, document_id: int) -> Optional[Tuple[Document, Optional[DocumentData]]]:
        with Session(self.engine) as session:
            document = session.get(Document, document_id)
            if document is None:
                return None
            data = session.exec(
                select(DocumentData).where(DocumentData.document_id == document_id)
            ).first()
            return document, data

    def list_documents(self, property_id: int) -> List[Tuple[Document, Optional[DocumentData]]]:
        """Documentos de una propiedad, cada uno con sus datos (o None)"""
        with Session(self.engine) as session:
            statement = (
                select(Document, DocumentData)
                .join(DocumentData, DocumentData.document_id == Document.id, isouter=True)
                .where(Document.property_id == property_id)
                .order_by(Document.created_at, Document.id)
            )
            return [(document, data) for document, data in session.exec(statement).all()]

    # Evaluaciones

    def create_evaluation(self, evaluation: Evaluation) -> Evaluation:
        with Session(self.engine) as session:
            self._require_property(session, evaluation.property_id)
            session.add(evaluation)
            session.commit()
            session.refresh(evaluation)
            logger.info(
                f"Evaluation {evaluation.id} saved for property {evaluation.property_id}: "
                f"{evaluation.estimated_value} {evaluation.currency}"
            )
            return evaluation

    def get_evaluation(self, evaluation_id: int) -> Optional[Evaluation]:
        with Session(self.engine) as session:
            return session.get(Evaluation, evaluation_id)

    def get_latest_evaluation(self, property_id: int) -> Optional[Evaluation]:
        """Evaluación más reciente de la propiedad (created_at, luego id)"""
        with Session(self.engine) as session:
            statement = (
                select(Evaluation)
                .where(Evaluation.property_id == property_id)
                .order_by(Evaluation.created_at.desc(), Evaluation.id.desc())
            )
            return session.exec(statement).first()

    def list_evaluation_history(self, limit: int = DEFAULT_HISTORY_LIMIT) -> List[Tuple[Evaluation, Property]]:
        """Historial de evaluaciones con su propiedad, las más nuevas primero"""
        with Session(self.engine) as session:
            statement = (
                select(Evaluation, Property)
                .join(Property, Evaluation.property_id == Property.id)
                .order_by(Evaluation.created_at.desc(), Evaluation.id.desc())
                .limit(limit)
            )
            return [(evaluation, prop) for evaluation, prop in session.exec(statement).all()]

    def verify_evaluation(self, evaluation_id: int, verified_by: str) -> Evaluation:
        with Session(self.engine) as session:
            evaluation = session.get(Evaluation, evaluation_id)
            if evaluation is None:
                raise EntityNotFoundError(f"Evaluation {evaluation_id} not found")

            evaluation.status = EvaluationStatus.verified
            evaluation.verified_by = verified_by
            evaluation.verification_date = datetime.utcnow()
            session.add(evaluation)
            session.commit()
            session.refresh(evaluation)
            logger.info(f"Evaluation {evaluation_id} verified by {verified_by}")
            return evaluation
