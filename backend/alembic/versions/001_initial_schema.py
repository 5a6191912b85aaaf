"""Initial schema

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates every table of the API: users, dossiers and their people,
       the plan contents, alimentatie, reference tables and subscriptions.
How:   Tables are created parents first. The one cycle
       (alimentaties.bijdrage_kosten_kinderen → bijdragen_kosten_kinderen)
       is closed with a separate foreign key once both tables exist.
       Dagen and dagdelen are seeded; the API validates against their ids.

Rollback: downgrade() drops every table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(created: str = "aangemaakt_op", updated: str = "gewijzigd_op"):
    return [
        sa.Column(created, sa.TIMESTAMP(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
        sa.Column(updated, sa.TIMESTAMP(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False),
    ]


def _money(name: str, nullable: bool = True) -> sa.Column:
    return sa.Column(name, sa.Numeric(10, 2), nullable=nullable)


def upgrade() -> None:
    # ── Reference tables ──────────────────────────────────────────────────
    for table, length in (
        ("rollen", 50),
        ("relatie_types", 50),
        ("dagen", 20),
        ("dagdelen", 20),
        ("zorg_categorieen", 100),
        ("schoolvakanties", 100),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("naam", sa.String(length), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )

    op.create_table(
        "week_regelingen",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("omschrijving", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "zorg_situaties",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("naam", sa.String(200), nullable=False),
        sa.Column("zorg_categorie_id", sa.Integer(), sa.ForeignKey("zorg_categorieen.id"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_zorg_situaties_zorg_categorie_id", "zorg_situaties", ["zorg_categorie_id"])
    op.create_table(
        "regelingen_templates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("template_naam", sa.String(100), nullable=False),
        sa.Column("template_tekst", sa.Text(), nullable=False),
        sa.Column("meervoud_kinderen", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("type", sa.String(50), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_regelingen_templates_type", "regelingen_templates", ["type"])

    # ── Users ─────────────────────────────────────────────────────────────
    op.create_table(
        "gebruikers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("auth0_id", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("naam", sa.String(255), nullable=True),
        sa.Column("laatste_login", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("has_active_subscription", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("mollie_customer_id", sa.String(50), nullable=True),
        sa.Column("trial_gebruikt", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("klant_type", sa.String(20), nullable=True),
        sa.Column("telefoon", sa.String(20), nullable=True),
        sa.Column("straat", sa.String(255), nullable=True),
        sa.Column("huisnummer", sa.String(10), nullable=True),
        sa.Column("postcode", sa.String(10), nullable=True),
        sa.Column("plaats", sa.String(100), nullable=True),
        sa.Column("land", sa.String(2), nullable=True),
        sa.Column("bedrijfsnaam", sa.String(255), nullable=True),
        sa.Column("btw_nummer", sa.String(20), nullable=True),
        sa.Column("kvk_nummer", sa.String(8), nullable=True),
        sa.Column("is_zakelijk", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("profiel_compleet", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("profiel_ingevuld_op", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("auth0_id"),
    )
    op.create_index("ix_gebruikers_email", "gebruikers", ["email"])

    # ── Dossiers and people ───────────────────────────────────────────────
    op.create_table(
        "dossiers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("dossier_nummer", sa.String(50), nullable=False),
        sa.Column("gebruiker_id", sa.Integer(), sa.ForeignKey("gebruikers.id"), nullable=False),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_anoniem", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("template_type", sa.String(20), nullable=False, server_default=sa.text("'default'")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("dossier_nummer"),
    )
    op.create_index("ix_dossiers_gebruiker_id", "dossiers", ["gebruiker_id"])
    # Listing: WHERE gebruiker_id = ? ORDER BY gewijzigd_op DESC
    op.create_index("idx_dossiers_gewijzigd_op", "dossiers", [sa.text("gewijzigd_op DESC")])

    op.create_table(
        "personen",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("gebruiker_id", sa.Integer(), sa.ForeignKey("gebruikers.id"), nullable=True),
        sa.Column("voorletters", sa.String(10), nullable=True),
        sa.Column("voornamen", sa.String(100), nullable=True),
        sa.Column("roepnaam", sa.String(50), nullable=True),
        sa.Column("geslacht", sa.String(10), nullable=True),
        sa.Column("tussenvoegsel", sa.String(20), nullable=True),
        sa.Column("achternaam", sa.String(100), nullable=False),
        sa.Column("adres", sa.String(200), nullable=True),
        sa.Column("postcode", sa.String(10), nullable=True),
        sa.Column("plaats", sa.String(100), nullable=True),
        sa.Column("geboorteplaats", sa.String(255), nullable=True),
        sa.Column("geboorte_datum", sa.Date(), nullable=True),
        sa.Column("nationaliteit_1", sa.String(50), nullable=True),
        sa.Column("nationaliteit_2", sa.String(50), nullable=True),
        sa.Column("telefoon", sa.String(20), nullable=True),
        sa.Column("email", sa.String(100), nullable=True),
        sa.Column("beroep", sa.String(100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_personen_gebruiker_id", "personen", ["gebruiker_id"])
    op.create_index("ix_personen_email", "personen", ["email"])

    op.create_table(
        "dossiers_partijen",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("dossier_id", sa.Integer(), sa.ForeignKey("dossiers.id"), nullable=False),
        sa.Column("persoon_id", sa.Integer(), sa.ForeignKey("personen.id"), nullable=False),
        sa.Column("rol_id", sa.Integer(), sa.ForeignKey("rollen.id"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("dossier_id", "persoon_id", "rol_id", name="uq_dossiers_partijen_rol"),
    )
    op.create_index("ix_dossiers_partijen_dossier_id", "dossiers_partijen", ["dossier_id"])
    op.create_index("ix_dossiers_partijen_persoon_id", "dossiers_partijen", ["persoon_id"])

    op.create_table(
        "dossiers_kinderen",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("dossier_id", sa.Integer(), sa.ForeignKey("dossiers.id"), nullable=False),
        sa.Column("kind_id", sa.Integer(), sa.ForeignKey("personen.id"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_dossiers_kinderen_dossier_id", "dossiers_kinderen", ["dossier_id"])
    op.create_index("ix_dossiers_kinderen_kind_id", "dossiers_kinderen", ["kind_id"])

    op.create_table(
        "kind_ouder",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("kind_id", sa.Integer(), sa.ForeignKey("personen.id"), nullable=False),
        sa.Column("ouder_id", sa.Integer(), sa.ForeignKey("personen.id"), nullable=False),
        sa.Column("relatie_type_id", sa.Integer(), sa.ForeignKey("relatie_types.id"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("kind_id", "ouder_id", name="uq_kind_ouder"),
    )
    op.create_index("ix_kind_ouder_kind_id", "kind_ouder", ["kind_id"])
    op.create_index("ix_kind_ouder_ouder_id", "kind_ouder", ["ouder_id"])

    # ── Plan contents ─────────────────────────────────────────────────────
    op.create_table(
        "omgang",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("dossier_id", sa.Integer(), sa.ForeignKey("dossiers.id"), nullable=False),
        sa.Column("dag_id", sa.Integer(), sa.ForeignKey("dagen.id"), nullable=False),
        sa.Column("dagdeel_id", sa.Integer(), sa.ForeignKey("dagdelen.id"), nullable=False),
        sa.Column("verzorger_id", sa.Integer(), sa.ForeignKey("personen.id"), nullable=False),
        sa.Column("wissel_tijd", sa.String(5), nullable=True),
        sa.Column("week_regeling_id", sa.Integer(), sa.ForeignKey("week_regelingen.id"), nullable=False),
        sa.Column("week_regeling_anders", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_omgang_slot", "omgang", ["dossier_id", "dag_id", "dagdeel_id", "week_regeling_id"])

    op.create_table(
        "zorg",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("dossier_id", sa.Integer(), sa.ForeignKey("dossiers.id"), nullable=False),
        sa.Column("zorg_categorie_id", sa.Integer(), sa.ForeignKey("zorg_categorieen.id"), nullable=False),
        sa.Column("zorg_situatie_id", sa.Integer(), sa.ForeignKey("zorg_situaties.id"), nullable=False),
        sa.Column("overeenkomst", sa.Text(), nullable=False),
        sa.Column("situatie_anders", sa.String(500), nullable=True),
        sa.Column("aangemaakt_door", sa.Integer(), sa.ForeignKey("gebruikers.id"), nullable=False),
        sa.Column("gewijzigd_door", sa.Integer(), sa.ForeignKey("gebruikers.id"), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_zorg_dossier_id", "zorg", ["dossier_id"])

    op.create_table(
        "ouderschapsplan_info",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("dossier_id", sa.Integer(), sa.ForeignKey("dossiers.id"), nullable=False),
        sa.Column("partij_1_persoon_id", sa.Integer(), sa.ForeignKey("personen.id"), nullable=False),
        sa.Column("partij_2_persoon_id", sa.Integer(), sa.ForeignKey("personen.id"), nullable=False),
        sa.Column("soort_relatie", sa.String(100), nullable=True),
        sa.Column("soort_relatie_verbreking", sa.String(100), nullable=True),
        sa.Column("betrokkenheid_kind", sa.Text(), nullable=True),
        sa.Column("kiesplan", sa.String(100), nullable=True),
        sa.Column("gezag_partij", sa.Integer(), nullable=True),
        sa.Column("wa_op_naam_van_partij", sa.Integer(), nullable=True),
        sa.Column("keuze_devices", sa.Text(), nullable=True),
        sa.Column("zorgverzekering_op_naam_van_partij", sa.Integer(), nullable=True),
        sa.Column("kinderbijslag_partij", sa.Integer(), nullable=True),
        sa.Column("brp_partij_1", sa.JSON(), nullable=True),
        sa.Column("brp_partij_2", sa.JSON(), nullable=True),
        sa.Column("kgb_partij_1", sa.JSON(), nullable=True),
        sa.Column("kgb_partij_2", sa.JSON(), nullable=True),
        sa.Column("hoofdverblijf", sa.Text(), nullable=True),
        sa.Column("zorgverdeling", sa.Text(), nullable=True),
        sa.Column("opvang_kinderen", sa.Text(), nullable=True),
        sa.Column("bankrekeningnummers_op_naam_van_kind", sa.JSON(), nullable=True),
        sa.Column("parenting_coordinator", sa.Text(), nullable=True),
        *_timestamps("created_at", "updated_at"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("dossier_id"),
    )

    op.create_table(
        "communicatie_afspraken",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("dossier_id", sa.Integer(), sa.ForeignKey("dossiers.id"), nullable=False),
        sa.Column("villa_pinedo", sa.Boolean(), nullable=True),
        sa.Column("kies_methode", sa.String(50), nullable=True),
        sa.Column("omgang_tekst_of_schema", sa.String(50), nullable=True),
        sa.Column("opvang", sa.String(100), nullable=True),
        sa.Column("informatie_uitwisseling", sa.String(100), nullable=True),
        sa.Column("bijlage_beslissingen", sa.String(50), nullable=True),
        sa.Column("social_media", sa.String(100), nullable=True),
        sa.Column("mobiel_tablet", sa.String(100), nullable=True),
        sa.Column("id_bewijzen", sa.String(100), nullable=True),
        sa.Column("aansprakelijkheidsverzekering", sa.String(100), nullable=True),
        sa.Column("ziektekostenverzekering", sa.String(100), nullable=True),
        sa.Column("toestemming_reizen", sa.String(100), nullable=True),
        sa.Column("jongmeerderjarige", sa.String(100), nullable=True),
        sa.Column("studiekosten", sa.String(100), nullable=True),
        sa.Column("bankrekening_kinderen", sa.String(100), nullable=True),
        sa.Column("evaluatie", sa.String(50), nullable=True),
        sa.Column("parenting_coordinator", sa.String(100), nullable=True),
        sa.Column("mediation_clausule", sa.String(50), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("dossier_id"),
    )

    # ── Alimentatie ───────────────────────────────────────────────────────
    op.create_table(
        "alimentaties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("dossier_id", sa.Integer(), sa.ForeignKey("dossiers.id"), nullable=False),
        _money("netto_besteedbaar_gezinsinkomen"),
        _money("kosten_kinderen"),
        sa.Column("bijdrage_kosten_kinderen", sa.Integer(), nullable=True),
        sa.Column("bijdrage_template", sa.Integer(), nullable=True),
        _money("storting_ouder_1_kinderrekening"),
        _money("storting_ouder_2_kinderrekening"),
        sa.Column("kinderrekening_kostensoorten", sa.JSON(), nullable=True),
        sa.Column("kinderrekening_maximum_opname", sa.Boolean(), nullable=True),
        _money("kinderrekening_maximum_opname_bedrag"),
        sa.Column("kinderbijslag_storten_op_kinderrekening", sa.Boolean(), nullable=True),
        sa.Column("kindgebonden_budget_storten_op_kinderrekening", sa.Boolean(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_alimentaties_dossier_id", "alimentaties", ["dossier_id"])

    op.create_table(
        "bijdragen_kosten_kinderen",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("alimentatie_id", sa.Integer(), sa.ForeignKey("alimentaties.id"), nullable=False),
        sa.Column("personen_id", sa.Integer(), sa.ForeignKey("personen.id"), nullable=False),
        _money("eigen_aandeel"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bijdragen_kosten_kinderen_alimentatie_id", "bijdragen_kosten_kinderen", ["alimentatie_id"])

    # Closes the alimentaties ⇄ bijdragen_kosten_kinderen cycle
    op.create_foreign_key(
        "fk_alimentaties_bijdrage_kosten_kinderen",
        "alimentaties",
        "bijdragen_kosten_kinderen",
        ["bijdrage_kosten_kinderen"],
        ["id"],
    )

    op.create_table(
        "financiele_afspraken_kinderen",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("alimentatie_id", sa.Integer(), sa.ForeignKey("alimentaties.id"), nullable=False),
        sa.Column("kind_id", sa.Integer(), sa.ForeignKey("personen.id"), nullable=False),
        _money("alimentatie_bedrag"),
        sa.Column("hoofdverblijf", sa.String(255), nullable=True),
        sa.Column("kinderbijslag_ontvanger", sa.String(255), nullable=True),
        sa.Column("zorgkorting_percentage", sa.Integer(), nullable=True),
        sa.Column("inschrijving", sa.String(255), nullable=True),
        sa.Column("kindgebonden_budget", sa.String(255), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_financiele_afspraken_kinderen_alimentatie_id", "financiele_afspraken_kinderen", ["alimentatie_id"]
    )

    # ── Subscriptions ─────────────────────────────────────────────────────
    op.create_table(
        "abonnementen",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("gebruiker_id", sa.Integer(), sa.ForeignKey("gebruikers.id"), nullable=False),
        sa.Column("mollie_customer_id", sa.String(50), nullable=True),
        sa.Column("mollie_subscription_id", sa.String(50), nullable=True),
        sa.Column("mollie_mandate_id", sa.String(50), nullable=True),
        sa.Column("plan_type", sa.String(20), nullable=False, server_default=sa.text("'basic'")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("start_datum", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.Column("eind_datum", sa.Date(), nullable=True),
        sa.Column("trial_eind_datum", sa.Date(), nullable=True),
        _money("maandelijks_bedrag", nullable=False),
        sa.Column("volgende_betaling", sa.Date(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_abonnementen_gebruiker_id", "abonnementen", ["gebruiker_id"])
    op.create_index("ix_abonnementen_mollie_subscription_id", "abonnementen", ["mollie_subscription_id"])

    op.create_table(
        "betalingen",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("abonnement_id", sa.Integer(), sa.ForeignKey("abonnementen.id"), nullable=False),
        sa.Column("mollie_payment_id", sa.String(50), nullable=True),
        sa.Column("mollie_invoice_id", sa.String(50), nullable=True),
        _money("bedrag", nullable=False),
        sa.Column("btw_bedrag", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("factuur_pdf_url", sa.String(500), nullable=True),
        sa.Column("betaal_datum", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column(
            "aangemaakt_op", sa.TIMESTAMP(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP"), nullable=False
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_betalingen_abonnement_id", "betalingen", ["abonnement_id"])
    op.create_index("ix_betalingen_mollie_payment_id", "betalingen", ["mollie_payment_id"])

    # ── Seed data ─────────────────────────────────────────────────────────
    dagen = sa.table("dagen", sa.column("id", sa.Integer), sa.column("naam", sa.String))
    op.bulk_insert(
        dagen,
        [
            {"id": i, "naam": naam}
            for i, naam in enumerate(
                ["Maandag", "Dinsdag", "Woensdag", "Donderdag", "Vrijdag", "Zaterdag", "Zondag"], start=1
            )
        ],
    )
    dagdelen = sa.table("dagdelen", sa.column("id", sa.Integer), sa.column("naam", sa.String))
    op.bulk_insert(
        dagdelen,
        [{"id": i, "naam": naam} for i, naam in enumerate(["Ochtend", "Middag", "Avond", "Nacht"], start=1)],
    )


def downgrade() -> None:
    op.drop_constraint("fk_alimentaties_bijdrage_kosten_kinderen", "alimentaties", type_="foreignkey")
    for table in (
        "betalingen",
        "abonnementen",
        "financiele_afspraken_kinderen",
        "bijdragen_kosten_kinderen",
        "alimentaties",
        "communicatie_afspraken",
        "ouderschapsplan_info",
        "zorg",
        "omgang",
        "kind_ouder",
        "dossiers_kinderen",
        "dossiers_partijen",
        "personen",
        "dossiers",
        "gebruikers",
        "regelingen_templates",
        "zorg_situaties",
        "week_regelingen",
        "schoolvakanties",
        "zorg_categorieen",
        "dagdelen",
        "dagen",
        "relatie_types",
        "rollen",
    ):
        op.drop_table(table)
