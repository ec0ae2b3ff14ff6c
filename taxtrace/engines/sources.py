"""Source-document leaves.

Every document field and user entry a rule module reads enters the graph
here, as a leaf TracedValue. Rule modules never read the TaxReturn's
amounts directly; they read these nodes.
"""

from taxtrace.engines.builder import ModuleBuilder, ValueStore
from taxtrace.models.enums import DeductionMethod
from taxtrace.models.results import ModuleResult
from taxtrace.models.tax_return import TaxReturn
from taxtrace.models.traced import from_document, from_user_entry

MODULE = "sources"


def w2_node(w2_id: str, box: str) -> str:
    return f"w2:{w2_id}:{box}"


def int_node(form_id: str, box: str) -> str:
    return f"1099int:{form_id}:{box}"


def div_node(form_id: str, box: str) -> str:
    return f"1099div:{form_id}:{box}"


def r_node(form_id: str, box: str) -> str:
    return f"1099r:{form_id}:{box}"


def b_node(transaction_id: str, column: str) -> str:
    return f"1099b:{transaction_id}:{column}"


def user_node(field: str) -> str:
    return f"user:{field}"


ITEMIZED_FIELDS = {
    "medical_expenses": "itemized.medicalExpenses",
    "state_local_taxes": "itemized.stateLocalTaxes",
    "mortgage_interest": "itemized.mortgageInterest",
    "charitable_contributions": "itemized.charitableContributions",
    "other_deductions": "itemized.otherDeductions",
}


def compute_sources(tax_return: TaxReturn, store: ValueStore) -> ModuleResult:
    b = ModuleBuilder(MODULE, store)

    for w2 in tax_return.w2s:
        who = w2.employer_name
        b.add(from_document(w2.box1_wages, "w2", w2.id, "box1", "Form W-2, Box 1", f"{who} wages"))
        b.add(from_document(
            w2.box2_federal_withheld, "w2", w2.id, "box2", "Form W-2, Box 2",
            f"{who} federal income tax withheld",
        ))
        if w2.box15_state:
            b.add(from_document(
                w2.box17_state_withheld, "w2", w2.id, "box17", "Form W-2, Box 17",
                f"{who} {w2.box15_state} income tax withheld",
            ))

    for form in tax_return.form1099_ints:
        payer = form.payer_name
        b.add(from_document(form.box1_interest, "1099int", form.id, "box1", "Form 1099-INT, Box 1", f"{payer} interest"))
        b.add(from_document(
            form.box3_us_obligation_interest, "1099int", form.id, "box3", "Form 1099-INT, Box 3",
            f"{payer} U.S. obligation interest",
        ))
        b.add(from_document(form.box4_federal_withheld, "1099int", form.id, "box4", "Form 1099-INT, Box 4"))
        b.add(from_document(
            form.box8_tax_exempt_interest, "1099int", form.id, "box8", "Form 1099-INT, Box 8",
            f"{payer} tax-exempt interest",
        ))

    for form in tax_return.form1099_divs:
        payer = form.payer_name
        b.add(from_document(
            form.box1a_ordinary_dividends, "1099div", form.id, "box1a", "Form 1099-DIV, Box 1a",
            f"{payer} ordinary dividends",
        ))
        b.add(from_document(
            form.box1b_qualified_dividends, "1099div", form.id, "box1b", "Form 1099-DIV, Box 1b",
            f"{payer} qualified dividends",
        ))
        b.add(from_document(
            form.box2a_capital_gain_distributions, "1099div", form.id, "box2a", "Form 1099-DIV, Box 2a",
            f"{payer} capital gain distributions",
        ))
        b.add(from_document(form.box4_federal_withheld, "1099div", form.id, "box4", "Form 1099-DIV, Box 4"))
        b.add(from_document(
            form.box11_exempt_interest_dividends, "1099div", form.id, "box11", "Form 1099-DIV, Box 11",
            f"{payer} exempt-interest dividends",
        ))

    for form in tax_return.form1099_rs:
        b.add(from_document(form.box1_gross_distribution, "1099r", form.id, "box1", "Form 1099-R, Box 1"))
        b.add(from_document(
            form.box2a_taxable_amount, "1099r", form.id, "box2a", "Form 1099-R, Box 2a",
            f"{form.payer_name} taxable distribution",
        ))
        b.add(from_document(form.box4_federal_withheld, "1099r", form.id, "box4", "Form 1099-R, Box 4"))

    for tx in tax_return.capital_transactions:
        doc_id = tx.id
        b.add(from_document(tx.proceeds, "1099b", doc_id, "proceeds", "Form 1099-B, Box 1d", tx.description))
        b.add(from_document(tx.adjusted_basis, "1099b", doc_id, "basis", "Form 1099-B, Box 1e", tx.description))
        b.add(from_document(tx.adjustment_amount, "1099b", doc_id, "adjustment", "Form 8949, column (g)"))
        b.add(from_document(tx.gain_loss, "1099b", doc_id, "gainLoss", "Form 8949, column (h)", tx.description))

    for activity in tax_return.businesses:
        prefix = f"business.{activity.id}"
        b.add(from_user_entry(
            activity.qualified_income, f"{prefix}.qbi", "Form 8995-A, Part I",
            f"{activity.name} qualified business income",
        ))
        b.add(from_user_entry(activity.w2_wages, f"{prefix}.w2Wages", "Form 8995-A, Part II", f"{activity.name} W-2 wages"))
        b.add(from_user_entry(activity.ubia, f"{prefix}.ubia", "Form 8995-A, Part II", f"{activity.name} UBIA"))

    deductions = tax_return.deductions
    if deductions.method == DeductionMethod.ITEMIZED and deductions.itemized is not None:
        for attr, field in ITEMIZED_FIELDS.items():
            b.add(from_user_entry(getattr(deductions.itemized, attr), field, "Schedule A"))

    prior = tax_return.prior_year
    b.add(from_user_entry(
        prior.short_term_loss, "priorYear.shortTermLoss", "Schedule D, Line 6",
        "Short-term capital loss carryover",
    ))
    b.add(from_user_entry(
        prior.long_term_loss, "priorYear.longTermLoss", "Schedule D, Line 14",
        "Long-term capital loss carryover",
    ))
    b.add(from_user_entry(tax_return.estimated_tax_payments, "estimatedPayments", "Form 1040, Line 26"))

    return b.build()
