"""Alimentatie request/response models. Money is a float on the wire."""

from typing import List, Optional

from pydantic import AliasChoices, Field, PositiveInt

from ouderschaps_api.schemas.common import CamelModel


class AlimentatieIn(CamelModel):
    netto_besteedbaar_gezinsinkomen: Optional[float] = Field(default=None, ge=0)
    kosten_kinderen: Optional[float] = Field(default=None, ge=0)
    bijdrage_template_id: Optional[int] = None
    storting_ouder_1_kinderrekening: Optional[float] = Field(default=None, ge=0)
    storting_ouder_2_kinderrekening: Optional[float] = Field(default=None, ge=0)
    kinderrekening_kostensoorten: Optional[List[str]] = None
    kinderrekening_maximum_opname: Optional[bool] = None
    kinderrekening_maximum_opname_bedrag: Optional[float] = Field(default=None, ge=0)
    kinderbijslag_storten_op_kinderrekening: Optional[bool] = None
    kindgebonden_budget_storten_op_kinderrekening: Optional[bool] = None


class BijdrageKostenIn(CamelModel):
    personen_id: PositiveInt
    eigen_aandeel: Optional[float] = None


class FinancieleAfspraakIn(CamelModel):
    kind_id: PositiveInt
    alimentatie_bedrag: Optional[float] = None
    hoofdverblijf: Optional[str] = Field(default=None, max_length=255)
    kinderbijslag_ontvanger: Optional[str] = Field(default=None, max_length=255)
    zorgkorting_percentage: Optional[int] = Field(default=None, ge=0, le=100)
    inschrijving: Optional[str] = Field(default=None, max_length=255)
    kindgebonden_budget: Optional[str] = Field(default=None, max_length=255)


class BijdrageKostenOut(CamelModel):
    id: int
    alimentatie_id: int
    personen_id: int
    eigen_aandeel: Optional[float] = None


class FinancieleAfspraakOut(CamelModel):
    id: int
    alimentatie_id: int
    kind_id: int
    alimentatie_bedrag: Optional[float] = None
    hoofdverblijf: Optional[str] = None
    kinderbijslag_ontvanger: Optional[str] = None
    zorgkorting_percentage: Optional[int] = None
    inschrijving: Optional[str] = None
    kindgebonden_budget: Optional[str] = None


class AlimentatieOut(CamelModel):
    id: int
    dossier_id: int
    netto_besteedbaar_gezinsinkomen: Optional[float] = None
    kosten_kinderen: Optional[float] = None
    bijdrage_kosten_kinderen_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("bijdrage_kosten_kinderen", "bijdrageKostenKinderenId")
    )
    bijdrage_template_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("bijdrage_template", "bijdrageTemplateId")
    )
    storting_ouder_1_kinderrekening: Optional[float] = None
    storting_ouder_2_kinderrekening: Optional[float] = None
    kinderrekening_kostensoorten: Optional[List[str]] = None
    kinderrekening_maximum_opname: Optional[bool] = None
    kinderrekening_maximum_opname_bedrag: Optional[float] = None
    kinderbijslag_storten_op_kinderrekening: Optional[bool] = None
    kindgebonden_budget_storten_op_kinderrekening: Optional[bool] = None


class CompleteAlimentatieOut(CamelModel):
    alimentatie: AlimentatieOut
    bijdragen_kosten_kinderen: List[BijdrageKostenOut] = []
    financiele_afspraken_kinderen: List[FinancieleAfspraakOut] = []
