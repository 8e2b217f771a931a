from __future__ import annotations

from django.core.management.base import BaseCommand  # type: ignore

from apps.events.services import recalculate_prices
from apps.services.pricing import format_price


class Command(BaseCommand):
    help = "Recalcula o valor total dos orçamentos a partir do preço por convidado"

    def add_arguments(self, parser):  # type: ignore
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Apenas lista os valores incorretos, sem alterar o banco",
        )

    def handle(self, *args, **options):  # type: ignore
        dry_run = options["dry_run"]
        result = recalculate_prices(dry_run=dry_run)

        for line in result["corrected"]:
            self.stdout.write(
                f"#{line['id']}: {format_price(line['old'])} -> {format_price(line['new'])}"
            )

        corrected = len(result["corrected"])
        if not corrected:
            self.stdout.write(self.style.SUCCESS(f"{result['checked']} orçamentos verificados, todos corretos."))
            return

        verb = "seriam corrigidos" if dry_run else "corrigidos"
        self.stdout.write(
            self.style.WARNING(
                f"{corrected} de {result['checked']} orçamentos {verb} "
                f"(diferença total {result['total_difference']})."
            )
        )
